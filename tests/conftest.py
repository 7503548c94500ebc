import csv
from collections.abc import Callable
from pathlib import Path

import pytest

from rosterload.config import Settings
from rosterload.contact_store import ContactStore
from rosterload.database import build_engine
from rosterload.directory import SqlDirectory


USER_COLUMNS = ["First_Name", "Last_Name", "samAccount", "PostalCode", "MobilePhone", "OfficePhone"]
CONTACT_COLUMNS = ["first_name", "last_name", "city", "county", "zip", "officePhone", "mobilePhone"]


def write_feed(path: Path, columns: list[str], rows: list[dict[str, str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as outfile:
        writer = csv.DictWriter(outfile, fieldnames=columns, restval="")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
    return path


@pytest.fixture()
def temp_workspace(tmp_path: Path) -> Path:
    (tmp_path / "data" / "input").mkdir(parents=True, exist_ok=True)
    (tmp_path / "outputs").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def test_settings(temp_workspace: Path) -> Settings:
    return Settings(
        app_name="rosterload",
        database_url=f"sqlite:///{temp_workspace / 'clients.db'}",
        directory_url=f"sqlite:///{temp_workspace / 'directory.db'}",
        log_level="INFO",
        log_dir=str(temp_workspace / "logs"),
        output_dir=str(temp_workspace / "outputs"),
        users_csv=str(temp_workspace / "data" / "input" / "financePersonnel.csv"),
        contacts_csv=str(temp_workspace / "data" / "input" / "newClientData.csv"),
        domain_name="consultingfirm.com",
        user_container="Finance",
        container_policy="destructive",
    )


@pytest.fixture()
def directory(test_settings: Settings) -> SqlDirectory:
    directory = SqlDirectory(build_engine(test_settings.directory_url))
    directory.check_available()
    return directory


@pytest.fixture()
def contact_store(test_settings: Settings) -> ContactStore:
    return ContactStore(build_engine(test_settings.database_url))


@pytest.fixture()
def write_users(test_settings: Settings) -> Callable[[list[dict[str, str]]], Path]:
    return lambda rows: write_feed(Path(test_settings.users_csv), USER_COLUMNS, rows)


@pytest.fixture()
def write_contacts(test_settings: Settings) -> Callable[[list[dict[str, str]]], Path]:
    return lambda rows: write_feed(Path(test_settings.contacts_csv), CONTACT_COLUMNS, rows)
