"""
utils/column_utils.py

Purpose: Column type detection and mapping

- Classifies headers as phone / name / message / unknown
- Builds a best-effort ColumnMapping from a header list
- Applies manual mapping overrides
"""

import re
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import ValidationError
from app.schemas.contacts import ColumnMapping, ColumnType

# Evaluated in order; the first category with a matching pattern wins.
COLUMN_PATTERNS: List[Tuple[ColumnType, List[re.Pattern]]] = [
    ("phone", [re.compile(p, re.IGNORECASE) for p in (
        r"phone", r"mobile", r"رقم", r"هاتف", r"جوال", r"موبايل", r"tel", r"cell",
    )]),
    ("name", [re.compile(p, re.IGNORECASE) for p in (
        r"name", r"اسم", r"إسم", r"مشترك", r"عميل", r"customer", r"client",
    )]),
    ("message", [re.compile(p, re.IGNORECASE) for p in (
        r"message", r"sms", r"رسالة", r"نص", r"text", r"msg", r"content",
    )]),
]

MAPPING_SLOTS = ("phone", "name", "message")

# Value the mapping UI sends to clear a slot
CLEAR_SLOT = "none"


def _normalize_header(header: str) -> str:
    return re.sub(r"[_-]", "", str(header).lower())


def detect_column_type(header: str) -> ColumnType:
    """
    Classifies a column header.
    
    Args:
        header: Spreadsheet header text (English or Arabic)
    
    Returns:
        "phone", "name", "message" or "unknown"
    
    Example:
        >>> detect_column_type("Mobile_Number")
        'phone'
    """
    normalized = _normalize_header(header)
    for category, patterns in COLUMN_PATTERNS:
        if any(pattern.search(normalized) for pattern in patterns):
            return category
    return "unknown"


def auto_detect_columns(headers: List[str]) -> ColumnMapping:
    """
    Builds a mapping by assigning each slot the first header detected
    for it. Later headers of an already-filled category are ignored.
    
    Args:
        headers: Headers in spreadsheet order
    
    Returns:
        ColumnMapping with unmatched slots left empty
    """
    slots: Dict[str, str] = {slot: "" for slot in MAPPING_SLOTS}
    
    for header in headers:
        category = detect_column_type(header)
        if category != "unknown" and not slots[category]:
            slots[category] = header
    
    return ColumnMapping(**slots)


def is_auto_detected(mapping: ColumnMapping) -> bool:
    """True when auto-detection filled at least one slot."""
    return any(getattr(mapping, slot) for slot in MAPPING_SLOTS)


def apply_manual_mapping(
    mapping: ColumnMapping,
    headers: List[str],
    phone: Optional[str] = None,
    name: Optional[str] = None,
    message: Optional[str] = None,
) -> ColumnMapping:
    """
    Overrides mapping slots with user choices.
    
    None keeps the current slot; "" or "none" clears it. Any other value
    must be one of the upload's headers.
    
    Raises:
        ValidationError: If a slot names a header that is not in the upload
    """
    overrides = {"phone": phone, "name": name, "message": message}
    updated = mapping.model_dump()
    
    for slot, value in overrides.items():
        if value is None:
            continue
        if value in ("", CLEAR_SLOT):
            updated[slot] = ""
            continue
        if value not in headers:
            raise ValidationError(
                f"Column '{value}' does not exist in the uploaded file",
                code="UNKNOWN_COLUMN",
                details={"slot": slot, "column": value, "headers": headers}
            )
        updated[slot] = value
    
    return ColumnMapping(**updated)
