import asyncio
import logging

import pytest

import app.services.upload_service as upload_service
from app.core.exceptions import SpreadsheetError
from app.services.api_key_service import get_api_key, upsert_api_key
from app.services.spreadsheet_service import ParsedSpreadsheet


PARSED = ParsedSpreadsheet(
    headers=["Name", "Phone"],
    rows=[{"Name": "Ali", "Phone": "0501234567"}, {"Name": "Sara", "Phone": "0507654321"}],
)


def test_create_upload_stores_detected_mapping(fake_db, caplog):
    caplog.set_level(logging.INFO)

    upload = asyncio.run(upload_service.create_upload("acc-1", "contacts.xlsx", PARSED))

    stored = fake_db["uploads"].docs[0]
    assert stored["upload_id"] == upload["upload_id"]
    assert stored["mapping"] == {"phone": "Phone", "name": "Name", "message": ""}
    assert stored["auto_detected"] is True
    assert any("Upload stored" in r.getMessage() for r in caplog.records)


def test_create_upload_rejects_oversized_document(fake_db, monkeypatch):
    monkeypatch.setattr(upload_service, "MAX_UPLOAD_DOCUMENT_BYTES", 256)
    rows = [{"Name": "Contact %d" % i, "Phone": "05%08d" % i} for i in range(50)]

    with pytest.raises(SpreadsheetError) as exc_info:
        asyncio.run(upload_service.create_upload("acc-1", "big.csv", ParsedSpreadsheet(["Name", "Phone"], rows)))

    assert exc_info.value.status_code == 400
    assert exc_info.value.details["row_count"] == 50
    assert fake_db["uploads"].docs == []


def test_upsert_api_key_inserts_then_updates(fake_db, caplog):
    caplog.set_level(logging.INFO)

    first_id = asyncio.run(upsert_api_key("acc-1", " key-1 "))
    second_id = asyncio.run(upsert_api_key("acc-1", "key-2"))

    assert first_id == second_id
    assert len(fake_db["api_keys"].docs) == 1
    assert asyncio.run(get_api_key("acc-1")) == "key-2"
    assert [r.getMessage() for r in caplog.records if "API key" in r.getMessage()] == [
        "API key created",
        "API key updated",
    ]
