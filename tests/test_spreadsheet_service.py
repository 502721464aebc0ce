import io

import pandas as pd
import pytest

from app.core.exceptions import SpreadsheetError, ValidationError
from app.services.spreadsheet_service import check_extension, parse_spreadsheet


def _xlsx_bytes(rows, columns):
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(rows, columns=columns).to_excel(writer, index=False, sheet_name="Contacts")
    return buffer.getvalue()


def test_parse_xlsx():
    content = _xlsx_bytes(
        [["Ali", "0501234567", None], ["Sara", 501234567, "Hi"]],
        ["Name", " Phone ", "Message"],
    )

    parsed = parse_spreadsheet(content, "contacts.xlsx")

    assert parsed.headers == ["Name", "Phone", "Message"]
    assert parsed.rows[0] == {"Name": "Ali", "Phone": "0501234567", "Message": None}
    assert parsed.rows[1]["Phone"] == 501234567
    assert parsed.rows[1]["Message"] == "Hi"


def test_blank_rows_dropped():
    content = _xlsx_bytes(
        [["Ali", "0501234567"], [None, None], ["Sara", "0507654321"]],
        ["Name", "Phone"],
    )
    parsed = parse_spreadsheet(content, "contacts.xlsx")
    assert [r["Name"] for r in parsed.rows] == ["Ali", "Sara"]


def test_parse_csv_keeps_text():
    content = "الاسم,رقم الجوال\nعلي,0501234567\nسارة,+966 50 765 4321\n".encode("utf-8-sig")

    parsed = parse_spreadsheet(content, "contacts.csv")

    assert parsed.headers == ["الاسم", "رقم الجوال"]
    assert parsed.rows[0]["رقم الجوال"] == "0501234567"
    assert parsed.rows[1]["رقم الجوال"] == "+966 50 765 4321"


def test_csv_empty_cells_become_none():
    content = b"Name,Phone\nAli,\n"
    parsed = parse_spreadsheet(content, "c.csv")
    assert parsed.rows == [{"Name": "Ali", "Phone": None}]


def test_headers_equal_after_trim_rejected():
    content = b"Phone,Phone \n0501234567,0507654321\n"
    with pytest.raises(SpreadsheetError) as exc_info:
        parse_spreadsheet(content, "dupes.csv")
    assert exc_info.value.details["duplicates"] == ["Phone"]


def test_identical_headers_keep_both_columns():
    content = b"Phone,Phone\n0501234567,0507654321\n"
    parsed = parse_spreadsheet(content, "dupes.csv")
    assert len(parsed.headers) == 2
    assert sorted(parsed.rows[0].values()) == ["0501234567", "0507654321"]


def test_unreadable_file():
    with pytest.raises(SpreadsheetError) as exc_info:
        parse_spreadsheet(b"this is not a workbook", "broken.xlsx")
    assert exc_info.value.code == "SPREADSHEET_ERROR"


def test_header_only_file_is_empty():
    content = _xlsx_bytes([], ["Name", "Phone"])
    with pytest.raises(SpreadsheetError):
        parse_spreadsheet(content, "empty.xlsx")


def test_empty_csv():
    with pytest.raises(SpreadsheetError):
        parse_spreadsheet(b"", "empty.csv")


@pytest.mark.parametrize("filename", ["contacts.pdf", "contacts", ""])
def test_unsupported_extension(filename):
    with pytest.raises(ValidationError) as exc_info:
        check_extension(filename)
    assert exc_info.value.code == "UNSUPPORTED_FILE_TYPE"


def test_extension_case_insensitive():
    assert check_extension("CONTACTS.XLSX") == ".xlsx"
