from collections.abc import Callable, Sequence
import logging
from pathlib import Path
import uuid

from rosterload.config import Settings
from rosterload.contact_store import ContactStore
from rosterload.database import build_engine
from rosterload.db_models import utc_now
from rosterload.directory import SqlDirectory
from rosterload.feeds import read_csv_records
from rosterload.importer import ContactImporter, IdentityImporter
from rosterload.reporting import build_summary, publish_run_artifacts
from rosterload.schemas import Record, RunResult, SourceResult


logger = logging.getLogger(__name__)


class PreconditionError(RuntimeError):
    pass


class RunOrchestrator:
    def __init__(
        self,
        settings: Settings,
        *,
        directory: SqlDirectory | None = None,
        contact_store: ContactStore | None = None,
    ) -> None:
        self.settings = settings
        self.directory = directory
        self.contact_store = contact_store

    def run(self) -> RunResult:
        execution_id = uuid.uuid4().hex
        started_at = utc_now()
        logger.info("run started", extra={"execution_id": execution_id, "script_name": self.settings.app_name})

        self.check_preconditions()

        users = SourceResult()
        clients = SourceResult()

        identity_importer = IdentityImporter(self.settings, self.directory)
        contact_importer = ContactImporter(self.settings, self.contact_store)

        self._run_phase(
            IdentityImporter.source,
            users,
            lambda: identity_importer.run(self._read_feed(self.settings.users_csv), users),
        )
        self._run_phase(
            ContactImporter.source,
            clients,
            lambda: contact_importer.run(self._read_feed(self.settings.contacts_csv), clients),
        )

        stopped_at = utc_now()
        users_snapshot = users.snapshot()
        clients_snapshot = clients.snapshot()
        summary = build_summary(
            users_snapshot,
            clients_snapshot,
            started_at=started_at,
            stopped_at=stopped_at,
            execution_id=execution_id,
            script_name=self.settings.app_name,
        )
        artifacts = publish_run_artifacts(Path(self.settings.output_dir), summary, users_snapshot, clients_snapshot)

        logger.info(
            "run finished: users processed=%d created=%d failed=%d, clients processed=%d imported=%d failed=%d, errors=%d warnings=%d",
            summary.users_processed,
            summary.users_created,
            summary.users_failed,
            summary.clients_processed,
            summary.clients_imported,
            summary.clients_failed,
            summary.errors_count,
            summary.warnings_count,
            extra={"execution_id": execution_id, "duration_seconds": summary.duration_seconds},
        )
        return RunResult(summary=summary, users=users_snapshot, clients=clients_snapshot, artifacts=artifacts)

    def check_preconditions(self) -> None:
        problems: list[str] = []
        for label, path in (("users feed", self.settings.users_csv), ("contacts feed", self.settings.contacts_csv)):
            if not Path(path).is_file():
                problems.append(f"{label} not found: {path}")
        if not self.settings.directory_url:
            problems.append("DIRECTORY_URL is not configured")
        if not self.settings.database_url:
            problems.append("DATABASE_URL is not configured")
        if problems:
            self._fail_precondition("; ".join(problems))

        if self.directory is None:
            try:
                self.directory = SqlDirectory(build_engine(self.settings.directory_url))
            except Exception as exc:
                self._fail_precondition(f"identity directory unavailable: {exc}", cause=exc)
        if self.contact_store is None:
            try:
                self.contact_store = ContactStore(build_engine(self.settings.database_url))
            except Exception as exc:
                self._fail_precondition(f"contact database unavailable: {exc}", cause=exc)

        try:
            self.directory.check_available()
        except Exception as exc:
            self._fail_precondition(f"identity directory unavailable: {exc}", cause=exc)

    def _fail_precondition(self, message: str, cause: Exception | None = None) -> None:
        logger.critical("precondition check failed: %s", message)
        raise PreconditionError(message) from cause

    def _run_phase(self, source: str, result: SourceResult, fn: Callable[[], object]) -> None:
        logger.info("%s phase started", source)
        try:
            fn()
        except Exception as exc:
            # A broken phase is recorded against its own source only.
            result.add_error(f"{source} phase failed: {exc}")
            logger.exception("%s phase failed", source)

    def _read_feed(self, path: str) -> Sequence[Record]:
        records = read_csv_records(Path(path))
        logger.info("read %d record(s) from %s", len(records), path)
        return records
