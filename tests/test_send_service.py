import asyncio
import logging

import pytest

from app.core.exceptions import GatewayError, ValidationError
from app.schemas.contacts import Contact
from app.schemas.sms import GatewayResponse, OutgoingMessage
from app.services.send_service import (
    build_messages,
    check_send_preconditions,
    relay_messages,
    send_to_contacts,
)


class FakeGateway:
    def __init__(self, response=None, error=None):
        self.response = response or GatewayResponse(success=True, status_code=200)
        self.error = error
        self.calls = []

    async def send_batch(self, api_key, messages):
        self.calls.append((api_key, messages))
        if self.error:
            raise self.error
        return self.response


CONTACTS = [
    Contact(phone="0501234567", name="Ali"),
    Contact(phone="0507654321", name="Sara", custom_message="Custom for Sara"),
]


def test_precondition_order_api_key_first():
    with pytest.raises(ValidationError) as exc_info:
        check_send_preconditions("", "", [])
    assert exc_info.value.code == "MISSING_API_KEY"


def test_precondition_order_message_before_contacts():
    with pytest.raises(ValidationError) as exc_info:
        check_send_preconditions("key", "  ", [])
    assert exc_info.value.code == "MISSING_MESSAGE"


def test_precondition_no_contacts():
    with pytest.raises(ValidationError) as exc_info:
        check_send_preconditions("key", "Hi", [])
    assert exc_info.value.code == "NO_CONTACTS"


def test_custom_messages_satisfy_message_precondition():
    check_send_preconditions("key", "", [Contact(phone="0501234567", custom_message="Hello")])


def test_build_messages():
    messages, skipped = build_messages(CONTACTS, "Hi {name}, {name}")
    assert messages == [
        OutgoingMessage(to="0501234567", message="Hi Ali, {name}"),
        OutgoingMessage(to="0507654321", message="Custom for Sara"),
    ]
    assert skipped == 0


def test_build_messages_skips_blank_text():
    messages, skipped = build_messages(CONTACTS, "")
    assert [m.to for m in messages] == ["0507654321"]
    assert skipped == 1


def test_send_success():
    gateway = FakeGateway(GatewayResponse(success=True, status_code=200, skipped_count=1, raw={"ok": True}))

    result = asyncio.run(send_to_contacts(CONTACTS, "Hi {name}", " key ", gateway))

    assert result.success
    assert result.sent_count == 2
    assert result.skipped_count == 1
    assert "2" in result.message
    api_key, messages = gateway.calls[0]
    assert api_key == "key"
    assert messages[0].message == "Hi Ali"


def test_send_with_account_logs_and_returns_result(fake_db, caplog):
    caplog.set_level(logging.INFO)
    gateway = FakeGateway(GatewayResponse(success=True, status_code=200, raw={"ok": True}))

    result = asyncio.run(
        send_to_contacts(CONTACTS, "Hi {name}", "key", gateway, account_id="acc-1", upload_id="u-1")
    )

    assert result.success
    assert result.sent_count == 2
    assert len(gateway.calls) == 1
    log = fake_db["sms_logs"].docs[0]
    assert log["account_id"] == "acc-1"
    assert log["upload_id"] == "u-1"
    assert any("Sent 2 messages" in r.getMessage() for r in caplog.records)


def test_no_network_call_when_precondition_fails():
    gateway = FakeGateway()
    with pytest.raises(ValidationError):
        asyncio.run(send_to_contacts(CONTACTS, "Hi", "", gateway))
    assert gateway.calls == []


def test_gateway_failure_uses_gateway_message():
    gateway = FakeGateway(GatewayResponse(success=False, status_code=400, message="Insufficient balance"))

    with pytest.raises(GatewayError) as exc_info:
        asyncio.run(send_to_contacts(CONTACTS, "Hi", "key", gateway))

    assert exc_info.value.message == "Insufficient balance"
    assert exc_info.value.details["status_code"] == 400


def test_gateway_failure_without_message_uses_fallback():
    gateway = FakeGateway(GatewayResponse(success=False, status_code=500))

    with pytest.raises(GatewayError) as exc_info:
        asyncio.run(send_to_contacts(CONTACTS, "Hi", "key", gateway))

    assert exc_info.value.message == "Failed to send messages"


def test_unexpected_error_is_converted():
    gateway = FakeGateway(error=RuntimeError("boom"))

    with pytest.raises(GatewayError) as exc_info:
        asyncio.run(send_to_contacts(CONTACTS, "Hi", "key", gateway))

    assert "unexpected" in exc_info.value.message.lower()


def test_relay_drops_invalid_numbers():
    gateway = FakeGateway()
    messages = [
        OutgoingMessage(to="050 123 4567", message="a"),
        OutgoingMessage(to="12", message="b"),
        OutgoingMessage(to="  ", message="c"),
    ]

    result = asyncio.run(relay_messages(messages, "key", gateway, account_id=None))

    assert result.sent_count == 1
    assert result.skipped_count == 2
    assert result.invalid_numbers == ["12", "empty"]
    assert gateway.calls[0][1] == [OutgoingMessage(to="0501234567", message="a")]


def test_relay_no_valid_numbers():
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(relay_messages([OutgoingMessage(to="abc", message="x")], "key", FakeGateway(), account_id=None))
    assert exc_info.value.code == "NO_VALID_NUMBERS"
    assert exc_info.value.details == {"invalid_numbers": ["abc"]}


def test_relay_requires_api_key():
    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(relay_messages([], None, FakeGateway(), account_id=None))
    assert exc_info.value.code == "MISSING_API_KEY"
