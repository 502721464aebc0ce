from app.schemas.contacts import ColumnMapping, Contact
from app.services.contact_service import extract_contacts


ROWS = [
    {"Name": "Ali", "Phone": "050 123 4567"},
    {"Name": "Sara", "Phone": "abc"},
]


def test_end_to_end_scenario():
    mapping = ColumnMapping(phone="Phone", name="Name", message="")

    result = extract_contacts(ROWS, mapping)

    assert result.contacts == [Contact(name="Ali", phone="0501234567")]
    assert result.contacts[0].custom_message is None
    assert result.rejected_count == 1
    assert result.warning is not None
    assert "1" in result.warning


def test_no_phone_column_returns_empty():
    result = extract_contacts(ROWS, ColumnMapping(name="Name"))
    assert result.contacts == []
    assert result.rejected_count == 0
    assert result.warning is None


def test_empty_phone_cells_skipped_silently():
    rows = [
        {"Phone": "", "Name": "A"},
        {"Phone": None, "Name": "B"},
        {"Phone": "   ", "Name": "C"},
        {"Name": "D"},
        {"Phone": "0501234567", "Name": "E"},
    ]
    result = extract_contacts(rows, ColumnMapping(phone="Phone", name="Name"))
    assert [c.name for c in result.contacts] == ["E"]
    assert result.rejected_count == 0
    assert result.warning is None


def test_name_and_message_trimmed():
    rows = [{"P": "0501234567", "N": "  Ali  ", "M": "  Hello there "}]
    result = extract_contacts(rows, ColumnMapping(phone="P", name="N", message="M"))
    assert result.contacts == [Contact(phone="0501234567", name="Ali", custom_message="Hello there")]


def test_unset_name_slot_gives_empty_name():
    rows = [{"P": "0501234567", "N": "Ali"}]
    result = extract_contacts(rows, ColumnMapping(phone="P"))
    assert result.contacts[0].name == ""


def test_numeric_phone_cells():
    rows = [{"P": 966501234567.0}, {"P": 501234567}]
    result = extract_contacts(rows, ColumnMapping(phone="P"))
    assert [c.phone for c in result.contacts] == ["966501234567", "501234567"]


def test_preserves_row_order_and_is_deterministic():
    rows = [{"P": f"05012345{i:02d}", "N": str(i)} for i in range(10)]
    mapping = ColumnMapping(phone="P", name="N")

    first = extract_contacts(rows, mapping)
    second = extract_contacts(rows, mapping)

    assert first == second
    assert [c.name for c in first.contacts] == [str(i) for i in range(10)]


def test_remapping_recomputes_from_rows():
    rows = [{"A": "0501234567", "B": "0507654321"}]
    first = extract_contacts(rows, ColumnMapping(phone="A"))
    second = extract_contacts(rows, ColumnMapping(phone="B"))
    assert first.contacts[0].phone == "0501234567"
    assert second.contacts[0].phone == "0507654321"


def test_empty_rows():
    result = extract_contacts([], ColumnMapping(phone="P"))
    assert result.contacts == []
    assert result.warning is None
