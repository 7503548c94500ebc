from dataclasses import dataclass
import os

from dotenv import load_dotenv


load_dotenv()

CONTAINER_POLICIES = ("destructive", "create_if_absent")


@dataclass(frozen=True)
class Settings:
    app_name: str
    database_url: str
    directory_url: str
    log_level: str
    log_dir: str
    output_dir: str
    users_csv: str
    contacts_csv: str
    domain_name: str
    user_container: str
    container_policy: str


def get_settings() -> Settings:
    container_policy = os.getenv("CONTAINER_POLICY", "destructive").strip().lower()
    if container_policy not in CONTAINER_POLICIES:
        raise ValueError(f"CONTAINER_POLICY must be one of {', '.join(CONTAINER_POLICIES)}, got {container_policy!r}")

    return Settings(
        app_name=os.getenv("APP_NAME", "rosterload"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./clients.db"),
        directory_url=os.getenv("DIRECTORY_URL", "sqlite:///./directory.db"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "./logs"),
        output_dir=os.getenv("OUTPUT_DIR", "./outputs"),
        users_csv=os.getenv("USERS_CSV", "./data/input/financePersonnel.csv"),
        contacts_csv=os.getenv("CONTACTS_CSV", "./data/input/newClientData.csv"),
        domain_name=os.getenv("DOMAIN_NAME", "consultingfirm.com"),
        user_container=os.getenv("USER_CONTAINER", "Finance"),
        container_policy=container_policy,
    )
