"""
app/services/send_service.py

Purpose: Send orchestration

- Checks send preconditions (API key, message, contacts) in that order
- Resolves each contact's text (custom message or {name} template)
- Submits one batch to the SMS gateway and records the attempt
- Converts gateway failures and unexpected errors into GatewayError
"""

from typing import List, Optional, Tuple

from app.core.exceptions import GatewayError, HudhudError, ValidationError
from app.core.logging import get_logger, LogContext
from app.schemas.contacts import Contact
from app.schemas.sms import OutgoingMessage, RelayResult, SendResult
from app.services.gateway_service import SMSGatewayService
from app.services.sms_log_service import record_send_log
from utils import constants
from utils.phone_utils import validate_phone
from utils.sms_utils import resolve_message

logger = get_logger(__name__)


def check_send_preconditions(api_key: str, template: str, contacts: List[Contact]) -> None:
    """
    Validates a send before any network call.
    
    Order matters: a missing API key is reported before a missing
    message, which is reported before an empty contact list.
    
    Raises:
        ValidationError: With code MISSING_API_KEY, MISSING_MESSAGE or NO_CONTACTS
    """
    if not (api_key or "").strip():
        raise ValidationError(constants.MISSING_API_KEY_MESSAGE, code=constants.MISSING_API_KEY)
    
    has_template = bool((template or "").strip())
    has_custom = any(contact.custom_message for contact in contacts)
    if not has_template and not has_custom:
        raise ValidationError(constants.MISSING_MESSAGE_MESSAGE, code=constants.MISSING_MESSAGE)
    
    if not contacts:
        raise ValidationError(constants.NO_CONTACTS_MESSAGE, code=constants.NO_CONTACTS)


def build_messages(contacts: List[Contact], template: str) -> Tuple[List[OutgoingMessage], int]:
    """
    Resolves the outgoing text for every contact.
    
    Returns:
        (messages, skipped) where skipped counts contacts whose resolved
        text is blank
    """
    messages: List[OutgoingMessage] = []
    skipped = 0
    
    for contact in contacts:
        text = resolve_message(template, contact.name, contact.custom_message)
        if not text.strip():
            skipped += 1
            continue
        messages.append(OutgoingMessage(to=contact.phone, message=text))
    
    return messages, skipped


def _success_message(sent: int, skipped: int) -> str:
    message = constants.SEND_SUCCESS_MESSAGE.format(count=sent)
    if skipped:
        message += constants.SEND_SKIPPED_SUFFIX.format(count=skipped)
    return message


async def submit_batch(
    messages: List[OutgoingMessage],
    api_key: str,
    gateway: SMSGatewayService,
    account_id: Optional[str] = None,
    upload_id: Optional[str] = None,
    local_skipped: int = 0
) -> SendResult:
    """
    Sends a prepared batch in one gateway call.
    
    The batch is all-or-nothing from here: no retry and no partial
    resubmission. When `account_id` is given the attempt is logged.
    
    Args:
        messages: Resolved {to, message} pairs
        api_key: Gateway API key
        gateway: Gateway client
        account_id: Account to log the attempt under
        upload_id: Source upload for the log
        local_skipped: Recipients dropped before submission
    
    Returns:
        SendResult with sent and skipped counts
    
    Raises:
        GatewayError: Gateway rejected the batch or could not be reached
    """
    response = await gateway.send_batch(api_key, messages)
    
    if account_id:
        await record_send_log(
            account_id=account_id,
            recipients_count=len(messages),
            status="sent" if response.success else "failed",
            response_data=response.raw,
            first_message=messages[0].message if messages else None,
            upload_id=upload_id
        )
    
    if not response.success:
        raise GatewayError(
            response.message or constants.SEND_FAILED_MESSAGE,
            details={"status_code": response.status_code, "response": response.raw}
        )
    
    skipped = local_skipped + (response.skipped_count or 0)
    return SendResult(
        success=True,
        sent_count=len(messages),
        skipped_count=skipped,
        message=_success_message(len(messages), skipped),
        gateway_response=response.raw
    )


async def send_to_contacts(
    contacts: List[Contact],
    template: str,
    api_key: str,
    gateway: SMSGatewayService,
    account_id: Optional[str] = None,
    upload_id: Optional[str] = None
) -> SendResult:
    """
    Sends one message per contact through the gateway.
    
    Args:
        contacts: Validated contacts
        template: Shared text, used when a contact has no custom message
        api_key: Account's gateway API key
        gateway: Gateway client
        account_id: Account to log the attempt under
        upload_id: Source upload for the log
    
    Returns:
        SendResult
    
    Raises:
        ValidationError: A precondition failed (nothing was sent)
        GatewayError: Gateway failure or unexpected error during send
    """
    check_send_preconditions(api_key, template, contacts)
    
    with LogContext(account_id=account_id, upload_id=upload_id):
        try:
            messages, skipped = build_messages(contacts, template)
            if not messages:
                raise ValidationError(constants.MISSING_MESSAGE_MESSAGE, code=constants.MISSING_MESSAGE)
            
            result = await submit_batch(
                messages,
                api_key.strip(),
                gateway,
                account_id=account_id,
                upload_id=upload_id,
                local_skipped=skipped
            )
        except HudhudError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error sending messages: {e}", exc_info=True)
            raise GatewayError(constants.UNEXPECTED_ERROR_MESSAGE) from e
        
        logger.info(
            f"Sent {result.sent_count} messages, {result.skipped_count} skipped",
            extra={"contact_count": len(contacts)}
        )
        return result


async def relay_messages(
    messages: List[OutgoingMessage],
    api_key: Optional[str],
    gateway: SMSGatewayService,
    account_id: Optional[str] = None
) -> RelayResult:
    """
    Forwards caller-built messages to the gateway.
    
    Phone numbers are re-validated; invalid ones are dropped and
    reported back instead of failing the batch.
    
    Raises:
        ValidationError: MISSING_API_KEY, NO_CONTACTS or NO_VALID_NUMBERS
        GatewayError: Gateway failure or unexpected error during send
    """
    if not (api_key or "").strip():
        raise ValidationError(constants.MISSING_API_KEY_MESSAGE, code=constants.MISSING_API_KEY)
    
    if not messages:
        raise ValidationError(constants.NO_CONTACTS_MESSAGE, code=constants.NO_CONTACTS)
    
    valid: List[OutgoingMessage] = []
    invalid_numbers: List[str] = []
    
    for msg in messages:
        validation = validate_phone(msg.to)
        if not validation.valid:
            invalid_numbers.append(msg.to.strip() or "empty")
            continue
        valid.append(OutgoingMessage(to=validation.cleaned, message=msg.message or ""))
    
    if not valid:
        raise ValidationError(
            constants.NO_VALID_NUMBERS_MESSAGE,
            code=constants.NO_VALID_NUMBERS,
            details={"invalid_numbers": invalid_numbers}
        )
    
    logger.info(
        f"Relaying {len(valid)} messages, {len(invalid_numbers)} invalid numbers skipped",
        extra={"account_id": account_id}
    )
    
    try:
        result = await submit_batch(
            valid,
            api_key.strip(),
            gateway,
            account_id=account_id,
            local_skipped=len(invalid_numbers)
        )
    except HudhudError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error relaying messages: {e}", exc_info=True)
        raise GatewayError(constants.UNEXPECTED_ERROR_MESSAGE) from e
    
    return RelayResult(
        **result.model_dump(),
        invalid_numbers=invalid_numbers or None
    )
