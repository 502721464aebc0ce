"""
app/services/sms_log_service.py

Purpose: Send history

- Records one document per gateway call
- Keeps recipient count, status, gateway reply and a template excerpt
"""

from datetime import datetime
from typing import Any, Optional

from app.db.mongo import get_sms_logs_collection
from app.core.logging import get_logger
from utils.constants import SMS_LOG_TEMPLATE_LIMIT

logger = get_logger(__name__)


async def record_send_log(
    account_id: str,
    recipients_count: int,
    status: str,
    response_data: Any = None,
    first_message: Optional[str] = None,
    upload_id: Optional[str] = None
) -> Optional[str]:
    """
    Saves a send attempt.
    
    Args:
        account_id: Account that triggered the send
        recipients_count: Messages submitted to the gateway
        status: "sent" or "failed"
        response_data: Gateway reply body
        first_message: First resolved message; stored truncated
        upload_id: Source upload, when the send came from one
    
    Returns:
        Log id, or None when the log could not be written
    """
    sms_logs = get_sms_logs_collection()
    
    try:
        result = await sms_logs.insert_one({
            "account_id": account_id,
            "upload_id": upload_id,
            "recipients_count": recipients_count,
            "status": status,
            "response_data": response_data,
            "message_template": first_message[:SMS_LOG_TEMPLATE_LIMIT] if first_message else None,
            "created_at": datetime.utcnow()
        })
    except Exception as e:
        # The gateway call already happened; a missing log must not turn it into an error
        logger.error(f"Failed to save SMS log: {e}", extra={"account_id": account_id}, exc_info=True)
        return None
    
    logger.info(f"SMS log saved, status: {status}", extra={"account_id": account_id})
    return str(result.inserted_id)
