"""
app/api/sms.py

Purpose: Direct send endpoint

- Accepts ready-made {to, message} pairs
- Uses the account's stored API key
- Drops invalid numbers and reports them, logs the gateway call
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_account_id, get_gateway
from app.core.logging import get_logger, LogContext
from app.schemas.sms import RelayRequest, RelayResult
from app.services.api_key_service import get_api_key
from app.services.gateway_service import SMSGatewayService
from app.services.send_service import relay_messages

logger = get_logger(__name__)
router = APIRouter(prefix="/sms")


@router.post("/send", response_model=RelayResult)
async def send_sms(
    request: RelayRequest,
    account_id: str = Depends(get_account_id),
    gateway: SMSGatewayService = Depends(get_gateway)
):
    with LogContext(account_id=account_id):
        api_key = await get_api_key(account_id)
        return await relay_messages(request.messages, api_key, gateway, account_id)
