"""
app/services/contact_service.py

Purpose: Contact list extraction

- Turns raw spreadsheet rows into validated contacts using a mapping
- Skips rows with empty phone cells silently
- Counts rows rejected for invalid phone numbers
- Pure: same rows + mapping always give the same contacts
"""

from typing import List

from app.core.logging import get_logger
from app.schemas.contacts import ColumnMapping, Contact, ExtractionResult, RawRow
from utils.constants import ROWS_SKIPPED_WARNING
from utils.phone_utils import cell_to_text, validate_phone

logger = get_logger(__name__)


def extract_contacts(rows: List[RawRow], mapping: ColumnMapping) -> ExtractionResult:
    """
    Builds the contact list for the given rows and column mapping.
    
    Args:
        rows: Raw rows (header -> cell value) in spreadsheet order
        mapping: Current column mapping
    
    Returns:
        ExtractionResult with accepted contacts, the number of rows
        rejected for invalid phones, and a warning when any were rejected
    """
    if not mapping.phone:
        return ExtractionResult()
    
    contacts: List[Contact] = []
    rejected = 0
    
    for row in rows:
        phone_text = cell_to_text(row.get(mapping.phone))
        if not phone_text:
            continue
        
        validation = validate_phone(phone_text)
        if not validation.valid:
            rejected += 1
            continue
        
        name = cell_to_text(row.get(mapping.name)) if mapping.name else ""
        custom_message = cell_to_text(row.get(mapping.message)) if mapping.message else None
        
        contacts.append(Contact(
            phone=validation.cleaned,
            name=name,
            custom_message=custom_message
        ))
    
    warning = None
    if rejected > 0 and rows:
        warning = ROWS_SKIPPED_WARNING.format(count=rejected)
        logger.warning(
            f"Skipped {rejected} rows with invalid phone numbers",
            extra={"contact_count": len(contacts)}
        )
    
    return ExtractionResult(contacts=contacts, rejected_count=rejected, warning=warning)
