from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime


Record = Mapping[str, str]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class SourceSnapshot:
    processed: int
    succeeded: int
    failed: int
    warnings: tuple[str, ...]
    errors: tuple[str, ...]
    succeeded_records: tuple[Record, ...]


@dataclass
class SourceResult:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    succeeded_records: list[Record] = field(default_factory=list)

    def begin_record(self) -> None:
        self.processed += 1

    def record_success(self, record: Record) -> None:
        self.succeeded += 1
        self.succeeded_records.append(record)

    def record_failure(self, reason: str | None = None) -> None:
        self.failed += 1
        if reason is not None:
            self.errors.append(reason)

    def record_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_error(self, message: str) -> None:
        # Setup and phase failures are not tied to a record, so counts stay put.
        self.errors.append(message)

    def snapshot(self) -> SourceSnapshot:
        return SourceSnapshot(
            processed=self.processed,
            succeeded=self.succeeded,
            failed=self.failed,
            warnings=tuple(self.warnings),
            errors=tuple(self.errors),
            succeeded_records=tuple(self.succeeded_records),
        )


@dataclass(frozen=True)
class RunSummary:
    execution_id: str
    script_name: str
    started_at: datetime
    stopped_at: datetime
    users_processed: int
    users_created: int
    users_failed: int
    clients_processed: int
    clients_imported: int
    clients_failed: int
    errors_count: int
    warnings_count: int

    @property
    def duration_seconds(self) -> float:
        return round((self.stopped_at - self.started_at).total_seconds(), 2)

    def to_dict(self) -> dict[str, object]:
        return {
            "ExecutionID": self.execution_id,
            "ScriptName": self.script_name,
            "StartTime": self.started_at.strftime(TIMESTAMP_FORMAT),
            "StopTime": self.stopped_at.strftime(TIMESTAMP_FORMAT),
            "DurationSeconds": self.duration_seconds,
            "Users_Processed": self.users_processed,
            "Users_Created": self.users_created,
            "Users_Failed": self.users_failed,
            "Clients_Processed": self.clients_processed,
            "Clients_Imported": self.clients_imported,
            "Clients_Failed": self.clients_failed,
            "ErrorsCount": self.errors_count,
            "WarningsCount": self.warnings_count,
        }


@dataclass(frozen=True)
class RunArtifacts:
    summary_path: str
    issue_report_path: str | None
    users_export_path: str | None
    clients_export_path: str | None


@dataclass(frozen=True)
class RunResult:
    summary: RunSummary
    users: SourceSnapshot
    clients: SourceSnapshot
    artifacts: RunArtifacts
