import pytest

from app.core.exceptions import ValidationError
from app.schemas.contacts import ColumnMapping
from utils.column_utils import (
    apply_manual_mapping,
    auto_detect_columns,
    detect_column_type,
    is_auto_detected,
)


@pytest.mark.parametrize("header,expected", [
    ("Phone", "phone"),
    ("mobile_number", "phone"),
    ("Tel", "phone"),
    ("Cell-Phone", "phone"),
    ("رقم الجوال", "phone"),
    ("هاتف", "phone"),
    ("Name", "name"),
    ("Customer", "name"),
    ("اسم العميل", "name"),
    ("Message", "message"),
    ("SMS_Text", "message"),
    ("رسالة", "message"),
    ("City", "unknown"),
    ("", "unknown"),
])
def test_detect_column_type(header, expected):
    assert detect_column_type(header) == expected


def test_phone_takes_priority_over_name():
    # matches both "phone" and "name"
    assert detect_column_type("phone_name") == "phone"


def test_name_takes_priority_over_message():
    assert detect_column_type("client message") == "name"


def test_separators_removed_before_matching():
    assert detect_column_type("m-o-b-i-l-e") == "phone"


def test_detect_is_deterministic():
    headers = ["Phone", "اسم", "Notes", "msg"]
    assert [detect_column_type(h) for h in headers] == [detect_column_type(h) for h in headers]


def test_auto_detect_first_match_wins():
    mapping = auto_detect_columns(["اسم", "phone", "Mobile"])
    assert mapping == ColumnMapping(name="اسم", phone="phone", message="")


def test_auto_detect_all_slots():
    mapping = auto_detect_columns(["Customer Name", "Mobile", "SMS"])
    assert mapping == ColumnMapping(phone="Mobile", name="Customer Name", message="SMS")
    assert is_auto_detected(mapping)


def test_auto_detect_nothing():
    mapping = auto_detect_columns(["A", "B"])
    assert mapping == ColumnMapping()
    assert not is_auto_detected(mapping)


def test_manual_mapping_overrides_and_clears():
    headers = ["Name", "Phone", "Alt", "Text"]
    mapping = ColumnMapping(phone="Phone", name="Name", message="Text")

    updated = apply_manual_mapping(mapping, headers, phone="Alt", message="none")

    assert updated == ColumnMapping(phone="Alt", name="Name", message="")
    assert mapping.phone == "Phone"


def test_manual_mapping_unknown_column():
    with pytest.raises(ValidationError) as exc_info:
        apply_manual_mapping(ColumnMapping(), ["Phone"], phone="Mobile")
    assert exc_info.value.code == "UNKNOWN_COLUMN"
