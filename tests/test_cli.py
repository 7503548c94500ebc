import csv
import os
from pathlib import Path
import subprocess
import sys


def _base_env(tmp_path: Path) -> dict[str, str]:
    env = os.environ.copy()
    env["DATABASE_URL"] = f"sqlite:///{tmp_path / 'clients.db'}"
    env["DIRECTORY_URL"] = f"sqlite:///{tmp_path / 'directory.db'}"
    env["LOG_DIR"] = str(tmp_path / "logs")
    env["OUTPUT_DIR"] = str(tmp_path / "outputs")
    env["USERS_CSV"] = str(tmp_path / "data" / "input" / "financePersonnel.csv")
    env["CONTACTS_CSV"] = str(tmp_path / "data" / "input" / "newClientData.csv")
    return env


def _run_cli(env: dict[str, str], *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, "-m", "rosterload.main", "run", *args],
        cwd=Path(__file__).resolve().parents[1],
        env=env,
        check=False,
        capture_output=True,
        text=True,
    )


def _write(path: Path, rows: list[list[str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as outfile:
        csv.writer(outfile).writerows(rows)


def test_cli_exits_nonzero_when_feed_is_missing(tmp_path: Path) -> None:
    env = _base_env(tmp_path)

    proc = _run_cli(env)

    assert proc.returncode == 2
    assert "status=aborted" in proc.stdout
    log_text = (tmp_path / "logs" / "rosterload.log").read_text(encoding="utf-8")
    assert " | FATAL | rosterload.pipeline | precondition check failed" in log_text
    assert not (tmp_path / "outputs" / "reports").exists()


def test_cli_returns_zero_when_run_completes(tmp_path: Path) -> None:
    env = _base_env(tmp_path)
    users_csv = tmp_path / "feeds" / "users.csv"
    _write(
        users_csv,
        [
            ["First_Name", "Last_Name", "samAccount", "PostalCode", "MobilePhone", "OfficePhone"],
            ["Ada", "Lovelace", "alovelace", "12345", "(555) 123-4567", ""],
            ["Grace", "Hopper", "", "", "", ""],
        ],
    )
    _write(
        Path(env["CONTACTS_CSV"]),
        [["first_name", "last_name", "city"], ["Alan", "Turing", "Wilmslow"]],
    )

    proc = _run_cli(env, "--users-csv", str(users_csv))

    assert proc.returncode == 0
    assert "status=completed" in proc.stdout
    assert "users_created=1 users_failed=1" in proc.stdout
    assert "clients_imported=1" in proc.stdout
    log_text = (tmp_path / "logs" / "rosterload.log").read_text(encoding="utf-8")
    assert " | WARN | rosterload.importer | Missing required fields for record: samAccount" in log_text


def test_cli_aborts_when_database_driver_cannot_load(tmp_path: Path) -> None:
    env = _base_env(tmp_path)
    env["DATABASE_URL"] = "nosuchdialect://nodriver/clients"
    _write(Path(env["USERS_CSV"]), [["First_Name", "Last_Name", "samAccount"], ["Ada", "Lovelace", "alovelace"]])
    _write(Path(env["CONTACTS_CSV"]), [["first_name", "last_name", "city"], ["Alan", "Turing", "Wilmslow"]])

    proc = _run_cli(env)

    assert proc.returncode == 2
    assert "status=aborted" in proc.stdout
    log_text = (tmp_path / "logs" / "rosterload.log").read_text(encoding="utf-8")
    assert " | FATAL | rosterload.pipeline | precondition check failed: contact database unavailable" in log_text
    assert not (tmp_path / "outputs" / "reports").exists()
