"""
app/services/upload_service.py

Purpose: Upload session management

- Stores one upload's headers, raw rows and current column mapping
- Re-derives the contact list from (rows, mapping) on every read
- Replaces the mapping wholesale on user edits
- Guards against concurrent sends of the same upload
"""

import uuid
from datetime import datetime
from typing import Any, Dict

import bson
from pymongo import ReturnDocument
from pymongo.errors import DocumentTooLarge

from app.core.exceptions import ConflictError, ResourceNotFoundError, SpreadsheetError
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_uploads_collection
from app.schemas.contacts import ColumnMapping, ExtractionResult, MappingUpdate, UploadSummary
from app.services.contact_service import extract_contacts
from app.services.spreadsheet_service import ParsedSpreadsheet
from utils import constants
from utils.column_utils import apply_manual_mapping, auto_detect_columns, is_auto_detected

logger = get_logger(__name__)

# Stay below MongoDB's 16 MB document cap
MAX_UPLOAD_DOCUMENT_BYTES = 15 * 1024 * 1024


def mapping_of(upload: Dict[str, Any]) -> ColumnMapping:
    return ColumnMapping(**upload.get("mapping", {}))


def contacts_of(upload: Dict[str, Any]) -> ExtractionResult:
    """Recomputes the contact list of a stored upload."""
    return extract_contacts(upload.get("rows", []), mapping_of(upload))


def summarize(upload: Dict[str, Any], notice: str = constants.FILE_LOADED_MESSAGE) -> UploadSummary:
    """
    Builds the API summary of an upload.
    
    Args:
        upload: Stored upload document
        notice: Notification template taking {count}
    
    Returns:
        UploadSummary with freshly extracted contact counts
    """
    extraction = contacts_of(upload)
    mapping = mapping_of(upload)
    warning = extraction.warning
    if not mapping.phone:
        warning = constants.PHONE_COLUMN_REQUIRED_MESSAGE
    
    return UploadSummary(
        upload_id=upload["upload_id"],
        filename=upload.get("filename", ""),
        headers=upload.get("headers", []),
        row_count=len(upload.get("rows", [])),
        mapping=mapping,
        auto_detected=upload.get("auto_detected", False),
        contact_count=len(extraction.contacts),
        rejected_count=extraction.rejected_count,
        warning=warning,
        notice=notice.format(count=len(extraction.contacts))
    )


async def create_upload(account_id: str, filename: str, parsed: ParsedSpreadsheet) -> Dict[str, Any]:
    """
    Stores a parsed spreadsheet with an auto-detected mapping.
    
    Args:
        account_id: Owner account
        filename: Original file name
        parsed: Headers and raw rows
    
    Returns:
        The stored upload document
    
    Raises:
        SpreadsheetError: The rows do not fit in a single upload document
    """
    upload_id = uuid.uuid4().hex
    
    with LogContext(account_id=account_id, upload_id=upload_id):
        mapping = auto_detect_columns(parsed.headers)
        now = datetime.utcnow()
        
        upload = {
            "upload_id": upload_id,
            "account_id": account_id,
            "filename": filename,
            "headers": parsed.headers,
            "rows": parsed.rows,
            "mapping": mapping.model_dump(),
            "auto_detected": is_auto_detected(mapping),
            "sending": False,
            "created_at": now,
            "updated_at": now
        }
        
        document_size = len(bson.encode(upload))
        if document_size > MAX_UPLOAD_DOCUMENT_BYTES:
            logger.warning(f"Upload rejected: document is {document_size} bytes")
            raise SpreadsheetError(
                constants.FILE_TOO_MANY_ROWS_MESSAGE,
                details={"filename": filename, "row_count": len(parsed.rows)}
            )
        
        uploads = get_uploads_collection()
        try:
            await uploads.insert_one(upload)
        except DocumentTooLarge as e:
            raise SpreadsheetError(
                constants.FILE_TOO_MANY_ROWS_MESSAGE,
                details={"filename": filename, "row_count": len(parsed.rows)}
            ) from e
        
        logger.info(f"Upload stored: {len(parsed.rows)} rows, mapping={mapping.model_dump()}")
        return upload


async def get_upload(account_id: str, upload_id: str) -> Dict[str, Any]:
    """
    Retrieves an upload owned by the account.
    
    Raises:
        ResourceNotFoundError: If missing, expired or owned by another account
    """
    uploads = get_uploads_collection()
    upload = await uploads.find_one({"upload_id": upload_id, "account_id": account_id})
    
    if not upload:
        raise ResourceNotFoundError(constants.UPLOAD_NOT_FOUND_MESSAGE, details={"upload_id": upload_id})
    
    return upload


async def update_mapping(account_id: str, upload_id: str, update: MappingUpdate) -> Dict[str, Any]:
    """
    Applies a manual mapping override.
    
    The mapping is replaced as a whole and marked as not auto-detected;
    contacts are re-derived from the stored rows by the caller.
    
    Raises:
        ResourceNotFoundError: Unknown upload
        ValidationError: A slot names a header that is not in the upload
    """
    with LogContext(account_id=account_id, upload_id=upload_id):
        upload = await get_upload(account_id, upload_id)
        
        mapping = apply_manual_mapping(
            mapping_of(upload),
            upload.get("headers", []),
            phone=update.phone,
            name=update.name,
            message=update.message
        )
        
        uploads = get_uploads_collection()
        updated = await uploads.find_one_and_update(
            {"upload_id": upload_id, "account_id": account_id},
            {
                "$set": {
                    "mapping": mapping.model_dump(),
                    "auto_detected": False,
                    "updated_at": datetime.utcnow()
                }
            },
            return_document=ReturnDocument.AFTER
        )
        
        if not updated:
            raise ResourceNotFoundError(constants.UPLOAD_NOT_FOUND_MESSAGE, details={"upload_id": upload_id})
        
        logger.info(f"Mapping updated: {mapping.model_dump()}")
        return updated


async def claim_send(account_id: str, upload_id: str) -> Dict[str, Any]:
    """
    Marks an upload as sending. Only one send per upload may be in flight.
    
    Returns:
        The upload document
    
    Raises:
        ResourceNotFoundError: Unknown upload
        ConflictError: A send is already running for this upload
    """
    uploads = get_uploads_collection()
    upload = await uploads.find_one_and_update(
        {"upload_id": upload_id, "account_id": account_id, "sending": False},
        {"$set": {"sending": True, "updated_at": datetime.utcnow()}},
        return_document=ReturnDocument.AFTER
    )
    
    if upload:
        return upload
    
    # Distinguish "busy" from "missing"
    await get_upload(account_id, upload_id)
    logger.warning("Send rejected, another send in flight", extra={"upload_id": upload_id})
    raise ConflictError(constants.SEND_IN_PROGRESS_MESSAGE, code=constants.SEND_IN_PROGRESS)


async def release_send(account_id: str, upload_id: str) -> None:
    uploads = get_uploads_collection()
    await uploads.update_one(
        {"upload_id": upload_id, "account_id": account_id},
        {"$set": {"sending": False, "updated_at": datetime.utcnow()}}
    )
