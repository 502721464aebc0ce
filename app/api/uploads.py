"""
app/api/uploads.py

Purpose: Spreadsheet upload, column mapping and send endpoints

- POST /uploads: parse file, auto-detect columns, count contacts
- GET /uploads/{id}: current summary
- PUT /uploads/{id}/mapping: manual override, contacts recomputed
- GET /uploads/{id}/contacts: preview with resolved messages
- POST /uploads/{id}/send: send through the gateway with the stored key
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.api.deps import get_account_id, get_gateway
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.logging import get_logger, LogContext
from app.schemas.contacts import ContactPreview, MappingUpdate, PreviewResponse, UploadSummary
from app.schemas.sms import SendRequest, SendResult
from app.services import upload_service
from app.services.api_key_service import get_api_key
from app.services.gateway_service import SMSGatewayService
from app.services.send_service import send_to_contacts
from app.services.spreadsheet_service import check_extension, parse_spreadsheet
from utils import constants
from utils.sms_utils import count_sms_segments, resolve_message

logger = get_logger(__name__)
router = APIRouter(prefix="/uploads")


@router.post("", response_model=UploadSummary, status_code=201)
async def upload_spreadsheet(
    file: UploadFile = File(...),
    account_id: str = Depends(get_account_id)
):
    """
    Parses an uploaded spreadsheet and stores it as an upload session.
    """
    filename = file.filename or ""
    check_extension(filename)
    
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise ValidationError(
            constants.FILE_TOO_LARGE_MESSAGE.format(max_mb=settings.MAX_UPLOAD_SIZE_MB),
            code="FILE_TOO_LARGE"
        )
    
    with LogContext(account_id=account_id):
        logger.info(f"📄 Upload received: {filename} ({len(content)} bytes)")
        parsed = await run_in_threadpool(parse_spreadsheet, content, filename)
        upload = await upload_service.create_upload(account_id, filename, parsed)
    
    return upload_service.summarize(upload)


@router.get("/{upload_id}", response_model=UploadSummary)
async def get_upload_summary(
    upload_id: str,
    account_id: str = Depends(get_account_id)
):
    upload = await upload_service.get_upload(account_id, upload_id)
    return upload_service.summarize(upload)


@router.put("/{upload_id}/mapping", response_model=UploadSummary)
async def update_column_mapping(
    upload_id: str,
    update: MappingUpdate,
    account_id: str = Depends(get_account_id)
):
    """
    Overrides the column mapping. The contact list is re-derived from
    the stored rows.
    """
    upload = await upload_service.update_mapping(account_id, upload_id, update)
    return upload_service.summarize(upload, notice=constants.MAPPING_UPDATED_MESSAGE)


@router.get("/{upload_id}/contacts", response_model=PreviewResponse)
async def preview_contacts(
    upload_id: str,
    template: str = Query("", description="Shared message text with optional {name}"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    account_id: str = Depends(get_account_id)
):
    """
    Lists contacts with the message each one would receive.
    """
    upload = await upload_service.get_upload(account_id, upload_id)
    extraction = upload_service.contacts_of(upload)
    
    previews = []
    for contact in extraction.contacts[:limit or settings.PREVIEW_LIMIT]:
        text = resolve_message(template, contact.name, contact.custom_message)
        previews.append(ContactPreview(
            phone=contact.phone,
            name=contact.name,
            message=text,
            segments=count_sms_segments(text)
        ))
    
    return PreviewResponse(
        upload_id=upload_id,
        contact_count=len(extraction.contacts),
        contacts=previews
    )


@router.post("/{upload_id}/send", response_model=SendResult)
async def send_upload(
    upload_id: str,
    request: SendRequest,
    account_id: str = Depends(get_account_id),
    gateway: SMSGatewayService = Depends(get_gateway)
):
    """
    Sends the upload's contacts through the gateway using the account's
    stored API key. Only one send per upload runs at a time.
    """
    upload = await upload_service.claim_send(account_id, upload_id)
    
    try:
        api_key = await get_api_key(account_id)
        extraction = upload_service.contacts_of(upload)
        
        return await send_to_contacts(
            extraction.contacts,
            request.template,
            api_key or "",
            gateway,
            account_id=account_id,
            upload_id=upload_id
        )
    finally:
        await upload_service.release_send(account_id, upload_id)
