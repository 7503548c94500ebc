from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from rosterload.feeds import write_csv, write_json, write_text
from rosterload.schemas import Record, RunArtifacts, RunSummary, SourceSnapshot


def build_summary(
    users: SourceSnapshot,
    clients: SourceSnapshot,
    *,
    started_at: datetime,
    stopped_at: datetime,
    execution_id: str,
    script_name: str,
) -> RunSummary:
    return RunSummary(
        execution_id=execution_id,
        script_name=script_name,
        started_at=started_at,
        stopped_at=stopped_at,
        users_processed=users.processed,
        users_created=users.succeeded,
        users_failed=users.failed,
        clients_processed=clients.processed,
        clients_imported=clients.succeeded,
        clients_failed=clients.failed,
        errors_count=len(users.errors) + len(clients.errors),
        warnings_count=len(users.warnings) + len(clients.warnings),
    )


def should_emit_issue_report(summary: RunSummary) -> bool:
    return summary.warnings_count + summary.errors_count > 0


def format_issue_report(users: SourceSnapshot, clients: SourceSnapshot) -> str:
    sections = [
        ("User Warnings", users.warnings),
        ("User Errors", users.errors),
        ("Client Warnings", clients.warnings),
        ("Client Errors", clients.errors),
    ]

    blocks: list[str] = []
    for title, messages in sections:
        if not messages:
            continue
        lines = [f"{title}:"]
        lines.extend(f"- {message}" for message in messages)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n" if blocks else ""


def export_succeeded_records(path: Path, records: Sequence[Record]) -> bool:
    if not records:
        return False
    write_csv(path, records)
    return True


def publish_run_artifacts(
    output_dir: Path,
    summary: RunSummary,
    users: SourceSnapshot,
    clients: SourceSnapshot,
) -> RunArtifacts:
    prefix = summary.execution_id
    summary_path = output_dir / "reports" / f"{prefix}-summary.json"
    issue_report_path = output_dir / "reports" / f"{prefix}-issues.txt"
    users_export_path = output_dir / "exports" / f"{prefix}-users.csv"
    clients_export_path = output_dir / "exports" / f"{prefix}-clients.csv"

    write_json(summary_path, summary.to_dict())

    wrote_issues = should_emit_issue_report(summary)
    if wrote_issues:
        write_text(issue_report_path, format_issue_report(users, clients))

    wrote_users = export_succeeded_records(users_export_path, users.succeeded_records)
    wrote_clients = export_succeeded_records(clients_export_path, clients.succeeded_records)

    return RunArtifacts(
        summary_path=str(summary_path),
        issue_report_path=str(issue_report_path) if wrote_issues else None,
        users_export_path=str(users_export_path) if wrote_users else None,
        clients_export_path=str(clients_export_path) if wrote_clients else None,
    )
