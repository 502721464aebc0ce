"""
app/api/deps.py

Purpose: Shared request dependencies

- Resolves the calling account from the session header
- Provides the SMS gateway client (overridable in tests)
"""

from typing import Optional

from fastapi import Header

from app.core.exceptions import AuthenticationError
from app.services.gateway_service import SMSGatewayService, get_gateway_service
from utils.constants import ACCOUNT_HEADER, MISSING_ACCOUNT_MESSAGE


async def get_account_id(
    account_id: Optional[str] = Header(None, alias=ACCOUNT_HEADER)
) -> str:
    """
    Returns the account id set by the session layer.
    
    Raises:
        AuthenticationError: If the header is missing or blank
    """
    if not account_id or not account_id.strip():
        raise AuthenticationError(MISSING_ACCOUNT_MESSAGE)
    return account_id.strip()


def get_gateway() -> SMSGatewayService:
    return get_gateway_service()
