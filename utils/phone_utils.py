"""
utils/phone_utils.py

Purpose: Phone number validation and normalization

- Strips separators (whitespace, hyphens, parentheses)
- Checks character set and digit-count bounds
- Renders spreadsheet cells as phone text
"""

import re
from typing import Any

from app.schemas.contacts import PhoneValidation

MIN_PHONE_DIGITS = 9
MAX_PHONE_DIGITS = 15

_SEPARATORS = re.compile(r"[\s\-()]")
_ALLOWED = re.compile(r"^[0-9+]+$")
_NON_DIGITS = re.compile(r"[^0-9]")


def validate_phone(raw: str) -> PhoneValidation:
    """
    Validates a raw phone string and returns its cleaned form.
    
    Rules, applied in order:
    1. Empty (after trim) -> "required"
    2. After removing separators, only digits and "+" may remain
       -> otherwise "invalid_characters"
    3. Fewer than 9 digits -> "too_short"
    4. More than 15 digits -> "too_long"
    
    Args:
        raw: Phone text as typed or read from a spreadsheet cell
    
    Returns:
        PhoneValidation with the separator-stripped value in `cleaned`
    
    Example:
        >>> validate_phone("050 123 4567").cleaned
        '0501234567'
    """
    text = (raw or "").strip()
    if not text:
        return PhoneValidation(valid=False, cleaned="", error="required")
    
    cleaned = _SEPARATORS.sub("", text)
    
    if not _ALLOWED.match(cleaned):
        return PhoneValidation(valid=False, cleaned=cleaned, error="invalid_characters")
    
    digit_count = len(_NON_DIGITS.sub("", cleaned))
    if digit_count < MIN_PHONE_DIGITS:
        return PhoneValidation(valid=False, cleaned=cleaned, error="too_short")
    if digit_count > MAX_PHONE_DIGITS:
        return PhoneValidation(valid=False, cleaned=cleaned, error="too_long")
    
    return PhoneValidation(valid=True, cleaned=cleaned)


def normalize_phone(raw: str) -> str:
    """
    Returns the canonical phone value, or the input unchanged when it is
    not a valid phone number. Idempotent.
    """
    result = validate_phone(raw)
    return result.cleaned if result.valid else raw


def cell_to_text(value: Any) -> str:
    """
    Renders a spreadsheet cell as trimmed text.
    
    Whole-number floats (Excel stores 0501234567 as 501234567.0) lose
    their ".0"; None and NaN become "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        if value != value:  # NaN
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()
