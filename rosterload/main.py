import argparse
from dataclasses import replace
import logging
from pathlib import Path

from rosterload.config import Settings, get_settings
from rosterload.pipeline import PreconditionError, RunOrchestrator


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE_NAME = "rosterload.log"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Provision directory users and import client contacts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="process both feeds once")
    run_parser.add_argument("--users-csv", required=False, help="Identity feed (overrides USERS_CSV)")
    run_parser.add_argument("--contacts-csv", required=False, help="Contact feed (overrides CONTACTS_CSV)")
    run_parser.add_argument(
        "--log-level",
        required=False,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides LOG_LEVEL)",
    )

    return parser.parse_args()


def configure_logging(settings: Settings) -> Path:
    logging.addLevelName(logging.WARNING, "WARN")
    logging.addLevelName(logging.CRITICAL, "FATAL")

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_path, mode="a", encoding="utf-8"), logging.StreamHandler()],
        force=True,
    )
    return log_path


def main() -> None:
    args = parse_args()
    settings = get_settings()
    overrides = {
        "users_csv": args.users_csv,
        "contacts_csv": args.contacts_csv,
        "log_level": args.log_level,
    }
    settings = replace(settings, **{key: value for key, value in overrides.items() if value})

    configure_logging(settings)

    try:
        result = RunOrchestrator(settings).run()
    except PreconditionError as exc:
        print(f"status=aborted error={exc}")
        raise SystemExit(2) from exc

    summary = result.summary
    print(
        "execution_id={execution_id} status=completed users_created={users_created} users_failed={users_failed} clients_imported={clients_imported} clients_failed={clients_failed} errors={errors} warnings={warnings} summary={summary_path}".format(
            execution_id=summary.execution_id,
            users_created=summary.users_created,
            users_failed=summary.users_failed,
            clients_imported=summary.clients_imported,
            clients_failed=summary.clients_failed,
            errors=summary.errors_count,
            warnings=summary.warnings_count,
            summary_path=result.artifacts.summary_path,
        )
    )


if __name__ == "__main__":
    main()
