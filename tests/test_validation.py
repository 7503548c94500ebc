from types import MappingProxyType

from rosterload.validation import (
    CONTACT_REQUIRED_FIELDS,
    USER_REQUIRED_FIELDS,
    is_valid_email,
    is_valid_phone,
    missing_required_fields,
)


def test_missing_required_fields_reports_absent_and_blank_in_order() -> None:
    record = MappingProxyType({"First_Name": "Ada", "Last_Name": "   ", "PostalCode": "12345"})

    missing = missing_required_fields(record, USER_REQUIRED_FIELDS)

    assert missing == ["Last_Name", "samAccount"]


def test_missing_required_fields_empty_for_complete_record() -> None:
    record = {"first_name": "Grace", "last_name": "Hopper", "city": "Arlington"}

    assert missing_required_fields(record, CONTACT_REQUIRED_FIELDS) == []


def test_missing_required_fields_with_no_requirements_is_empty() -> None:
    assert missing_required_fields({}, []) == []
    assert missing_required_fields({"anything": ""}, ()) == []


def test_missing_required_fields_does_not_mutate_record() -> None:
    record = {"First_Name": " Ada "}
    missing_required_fields(record, USER_REQUIRED_FIELDS)

    assert record == {"First_Name": " Ada "}


def test_phone_accepts_any_punctuation_with_ten_digits() -> None:
    assert is_valid_phone("(555) 123-4567")
    assert is_valid_phone("555.123.4567")
    assert is_valid_phone("5551234567")


def test_phone_rejects_wrong_digit_count() -> None:
    assert not is_valid_phone("555-123-456")
    assert not is_valid_phone("555-1234")
    assert not is_valid_phone("+1 (555) 123-4567")
    assert not is_valid_phone("")


def test_phone_strips_letters_instead_of_counting_them() -> None:
    assert not is_valid_phone("555-CALL-NOW")
    assert not is_valid_phone("555-CALL-ME")


def test_email_shape() -> None:
    assert is_valid_email("ada@example.com")
    assert is_valid_email("first.last@mail.example.org")
    assert not is_valid_email("ada@example")
    assert not is_valid_email("ada example@example.com")
    assert not is_valid_email("@example.com")
    assert not is_valid_email("ada@@example.com")
    assert not is_valid_email("ada@example.com\n")
    assert not is_valid_email(" ada@example.com")
