"""
app/schemas/sms.py

Purpose: SMS sending schemas

- Gateway request payload ({api_key, messages: [{to, message}]})
- Send request/response bodies
- API key settings bodies
"""

from pydantic import BaseModel, Field
from typing import Any, List, Optional


class OutgoingMessage(BaseModel):
    to: str
    message: str


class GatewayResponse(BaseModel):
    """
    Interpreted gateway reply: transport success plus optional message
    and gateway-side skipped count.
    """
    success: bool
    status_code: int
    message: Optional[str] = None
    skipped_count: Optional[int] = None
    raw: Optional[Any] = None


class SendRequest(BaseModel):
    template: str = Field(default="", description="Shared message text; {name} is replaced with the contact name")


class SendResult(BaseModel):
    success: bool
    sent_count: int
    skipped_count: int = 0
    message: str
    gateway_response: Optional[Any] = None


class RelayRequest(BaseModel):
    messages: List[OutgoingMessage] = Field(default_factory=list)


class RelayResult(SendResult):
    invalid_numbers: Optional[List[str]] = None


class ApiKeyUpdate(BaseModel):
    api_key: str = Field(..., min_length=1)


class ApiKeyStatus(BaseModel):
    has_key: bool
    masked_key: Optional[str] = None
    key_id: Optional[str] = None
