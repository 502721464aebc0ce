"""
app/services/gateway_service.py

Purpose: SMS gateway client

- Sends one bulk request {api_key, messages: [{to, message}]}
- Interprets the reply as success/failure + message + skippedCount
- Transport errors become a failed GatewayResponse (no retries)
"""

import httpx
from typing import Any, List, Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.schemas.sms import GatewayResponse, OutgoingMessage

logger = get_logger(__name__)


def _parse_skipped(body: Any) -> Optional[int]:
    if not isinstance(body, dict):
        return None
    value = body.get("skippedCount")
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


class SMSGatewayService:
    """Client for the bulk SMS gateway"""
    
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.url = url or settings.SMS_GATEWAY_URL
        self.timeout = timeout or settings.SMS_GATEWAY_TIMEOUT
        self._transport = transport
    
    async def send_batch(
        self,
        api_key: str,
        messages: List[OutgoingMessage]
    ) -> GatewayResponse:
        """
        Submits a batch of messages in a single request.
        
        Args:
            api_key: Account's gateway API key
            messages: Recipients and their resolved texts
            
        Returns:
            GatewayResponse; `success` mirrors the HTTP 2xx status
        """
        payload = {
            "api_key": api_key,
            "messages": [m.model_dump() for m in messages]
        }
        
        logger.info(f"📤 Sending {len(messages)} messages to SMS gateway")
        
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload)
        except httpx.TimeoutException:
            logger.error("SMS gateway timeout")
            return GatewayResponse(success=False, status_code=0, message="SMS gateway timeout")
        except httpx.RequestError as e:
            logger.error(f"Network error calling SMS gateway: {e}")
            return GatewayResponse(success=False, status_code=0, message="Unable to connect to SMS gateway")
        
        try:
            body = response.json()
        except ValueError:
            body = response.text or None
        
        message = body.get("message") if isinstance(body, dict) else None
        if message is not None:
            message = str(message)
        success = response.is_success
        
        if success:
            logger.info(f"✅ Gateway accepted batch: status={response.status_code}")
        else:
            logger.error(
                f"❌ Gateway error: {response.status_code} - {message}",
                extra={"status_code": response.status_code}
            )
        
        return GatewayResponse(
            success=success,
            status_code=response.status_code,
            message=message,
            skipped_count=_parse_skipped(body),
            raw=body
        )


# Singleton instance
gateway_service = SMSGatewayService()


def get_gateway_service() -> SMSGatewayService:
    return gateway_service
