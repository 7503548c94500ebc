import re
from collections.abc import Sequence

from rosterload.schemas import Record


USER_REQUIRED_FIELDS = ("First_Name", "Last_Name", "samAccount")
USER_PHONE_FIELDS = ("MobilePhone", "OfficePhone")
CONTACT_REQUIRED_FIELDS = ("first_name", "last_name", "city")

PHONE_DIGIT_COUNT = 10

_NON_DIGIT = re.compile(r"[^0-9]")
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def missing_required_fields(record: Record, required_fields: Sequence[str]) -> list[str]:
    missing: list[str] = []
    for name in required_fields:
        value = record.get(name)
        if value is None or not str(value).strip():
            missing.append(name)
    return missing


def is_valid_phone(value: str) -> bool:
    # Letters and punctuation are dropped, not counted.
    return len(_NON_DIGIT.sub("", value)) == PHONE_DIGIT_COUNT


def is_valid_email(value: str) -> bool:
    return _EMAIL_PATTERN.fullmatch(value) is not None
