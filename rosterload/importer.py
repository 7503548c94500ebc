import logging
from collections.abc import Callable, Sequence

from rosterload.config import Settings
from rosterload.contact_store import ContactStore
from rosterload.directory import SqlDirectory, build_user_attributes, org_unit_path
from rosterload.schemas import Record, SourceResult
from rosterload.validation import (
    CONTACT_REQUIRED_FIELDS,
    USER_PHONE_FIELDS,
    USER_REQUIRED_FIELDS,
    is_valid_phone,
    missing_required_fields,
)


logger = logging.getLogger(__name__)


def run_batch(
    records: Sequence[Record],
    *,
    source: str,
    required_fields: Sequence[str],
    realize: Callable[[Record], object],
    result: SourceResult,
    describe: Callable[[Record], str],
    verb: str = "realize",
    phone_fields: Sequence[str] = (),
) -> SourceResult:
    """Validate and realize each record in order; a failing record never stops the loop."""
    for record in records:
        result.begin_record()

        missing = missing_required_fields(record, required_fields)
        if missing:
            message = f"Missing required fields for record: {', '.join(missing)}"
            result.record_warning(message)
            result.record_failure()
            logger.warning(message, extra={"source": source, "missing_fields": missing})
            continue

        for field_name in phone_fields:
            value = (record.get(field_name) or "").strip()
            if value and not is_valid_phone(value):
                message = f"Invalid {field_name} format for {describe(record)}: {value}"
                result.record_warning(message)
                logger.warning(message, extra={"source": source, "field": field_name})

        try:
            realize(record)
        except Exception as exc:
            message = f"Failed to {verb} {describe(record)}: {exc}"
            result.record_failure(message)
            logger.error(message, extra={"source": source})
            continue

        result.record_success(record)
        logger.info("%sd %s", verb, describe(record), extra={"source": source})

    logger.info(
        "%s import finished: processed=%d succeeded=%d failed=%d",
        source,
        result.processed,
        result.succeeded,
        result.failed,
        extra={"source": source},
    )
    return result


def describe_user(record: Record) -> str:
    return f"user {record.get('samAccount', '').strip()} ({record.get('First_Name', '').strip()} {record.get('Last_Name', '').strip()})"


def describe_contact(record: Record) -> str:
    return f"client {record.get('first_name', '').strip()} {record.get('last_name', '').strip()}"


class IdentityImporter:
    source = "users"

    def __init__(self, settings: Settings, directory: SqlDirectory) -> None:
        self.settings = settings
        self.directory = directory
        self.org_unit = org_unit_path(settings.user_container, settings.domain_name)

    def run(self, records: Sequence[Record], result: SourceResult) -> SourceResult:
        try:
            self.directory.ensure_org_unit(self.org_unit, policy=self.settings.container_policy)
        except Exception as exc:
            message = f"Failed to prepare organizational unit {self.org_unit}: {exc}"
            result.add_error(message)
            logger.error(message, extra={"source": self.source})
            return result

        return run_batch(
            records,
            source=self.source,
            required_fields=USER_REQUIRED_FIELDS,
            realize=self._create_user,
            result=result,
            describe=describe_user,
            verb="create",
            phone_fields=USER_PHONE_FIELDS,
        )

    def _create_user(self, record: Record) -> object:
        attrs = build_user_attributes(record, domain_name=self.settings.domain_name, org_unit=self.org_unit)
        return self.directory.create_user(attrs)


class ContactImporter:
    source = "clients"

    def __init__(self, settings: Settings, store: ContactStore) -> None:
        self.settings = settings
        self.store = store

    def run(self, records: Sequence[Record], result: SourceResult) -> SourceResult:
        try:
            self.store.ensure_schema()
        except Exception as exc:
            message = f"Failed to prepare contact database: {exc}"
            result.add_error(message)
            logger.error(message, extra={"source": self.source})
            return result

        return run_batch(
            records,
            source=self.source,
            required_fields=CONTACT_REQUIRED_FIELDS,
            realize=self.store.insert_record,
            result=result,
            describe=describe_contact,
            verb="import",
        )
