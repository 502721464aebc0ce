"""
app/schemas/contacts.py

Purpose: Contact pipeline schemas

- ColumnMapping: semantic field -> spreadsheet header
- Contact: validated recipient derived from one row
- PhoneValidation / ExtractionResult: transient pipeline results
- Upload API request and response bodies
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional, Union


CellValue = Union[str, int, float, None]
RawRow = Dict[str, CellValue]

ColumnType = Literal["phone", "name", "message", "unknown"]
PhoneError = Literal["required", "invalid_characters", "too_short", "too_long"]


class ColumnMapping(BaseModel):
    """
    Maps the phone/name/message fields to spreadsheet headers.
    An empty string means the slot is unset.
    """
    phone: str = ""
    name: str = ""
    message: str = ""


class Contact(BaseModel):
    """
    A validated recipient. Never mutated after creation.
    """
    model_config = ConfigDict(frozen=True)
    
    phone: str
    name: str = ""
    custom_message: Optional[str] = None


class PhoneValidation(BaseModel):
    valid: bool
    cleaned: str
    error: Optional[PhoneError] = None


class ExtractionResult(BaseModel):
    contacts: List[Contact] = Field(default_factory=list)
    rejected_count: int = 0
    warning: Optional[str] = None


class MappingUpdate(BaseModel):
    """
    Manual override of the column mapping. Omitted fields keep their
    current value; "none" or "" clears a slot.
    """
    phone: Optional[str] = None
    name: Optional[str] = None
    message: Optional[str] = None


class UploadSummary(BaseModel):
    """
    Response body for upload and mapping endpoints.
    """
    upload_id: str
    filename: str
    headers: List[str]
    row_count: int
    mapping: ColumnMapping
    auto_detected: bool
    contact_count: int
    rejected_count: int
    warning: Optional[str] = None
    notice: str
    
    model_config = ConfigDict(json_schema_extra={
        "example": {
            "upload_id": "2f0c5c1e6c2b4d0e9d8f2a3b4c5d6e7f",
            "filename": "contacts.xlsx",
            "headers": ["Name", "Phone"],
            "row_count": 2,
            "mapping": {"phone": "Phone", "name": "Name", "message": ""},
            "auto_detected": True,
            "contact_count": 1,
            "rejected_count": 1,
            "warning": "1 rows were skipped because of invalid phone numbers",
            "notice": "1 contacts found"
        }
    })


class ContactPreview(BaseModel):
    phone: str
    name: str
    message: str
    segments: int


class PreviewResponse(BaseModel):
    upload_id: str
    contact_count: int
    contacts: List[ContactPreview]
