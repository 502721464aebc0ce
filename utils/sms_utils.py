"""
utils/sms_utils.py

Purpose: SMS message builders

- Resolves the final text for each contact
- Counts SMS segments
- Masks API keys for display
"""

import math
from typing import Optional

from utils.constants import NAME_PLACEHOLDER, SMS_SEGMENT_LENGTH


def apply_template(template: str, name: str) -> str:
    """
    Replaces the first {name} placeholder in the template.
    
    Only the first occurrence is substituted; later placeholders are
    left as typed.
    
    Example:
        >>> apply_template("Hi {name}, {name}", "Ali")
        'Hi Ali, {name}'
    """
    return template.replace(NAME_PLACEHOLDER, name, 1)


def resolve_message(template: str, name: str, custom_message: Optional[str] = None) -> str:
    """
    Picks the text sent to one contact.
    
    Args:
        template: Shared message text
        name: Contact name used for {name}
        custom_message: Per-row text from the message column
    
    Returns:
        custom_message verbatim when non-empty, else the filled template
    """
    if custom_message:
        return custom_message
    return apply_template(template or "", name)


def count_sms_segments(text: str) -> int:
    """
    Number of SMS parts needed for the text (70 characters per part,
    at least one).
    """
    return math.ceil(len(text) / SMS_SEGMENT_LENGTH) or 1


def mask_api_key(api_key: str) -> str:
    """
    Masks all but the last four characters of an API key.
    """
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return "*" * (len(api_key) - 4) + api_key[-4:]
