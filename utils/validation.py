# Input Validation
# Checks applied to client input before any record store, tracking or LLM call

import re
from typing import Optional

from config import CASE_STATUSES
from errors import ValidationError

# Record store IDs: "rec" followed by 14 alphanumeric characters
RECORD_ID_PATTERN = re.compile(r"^rec[a-zA-Z0-9]{14}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_record_id(record_id: str) -> bool:
    if not record_id or not isinstance(record_id, str):
        return False
    return bool(RECORD_ID_PATTERN.fullmatch(record_id))


def require_record_id(record_id: str, field: str = "id") -> str:
    """
    Validate a record identifier.

    Raises:
        ValidationError: If the ID does not have the record store's shape.
    """
    if not is_valid_record_id(record_id):
        raise ValidationError(field, "Invalid case ID format")
    return record_id


def is_valid_email(email: str) -> bool:
    if not email or not isinstance(email, str):
        return False
    return bool(EMAIL_PATTERN.fullmatch(email))


def require_email(email: str, field: str = "customer_email") -> str:
    if not is_valid_email(email):
        raise ValidationError(field, "Invalid email address")
    return email


def sanitize_status(status: Optional[str]) -> Optional[str]:
    """Return the status if it is a known case status, otherwise None."""
    if not status:
        return None
    return status if status in CASE_STATUSES else None


def sanitize_string(value: Optional[str], max_length: int = 1000) -> str:
    """Trim whitespace, cap the length and strip null bytes."""
    if not value or not isinstance(value, str):
        return ""
    return value.strip()[:max_length].replace("\0", "")


def require_text(value: Optional[str], field: str, min_length: int = 1, max_length: int = 5000) -> str:
    """
    Sanitize a required free-text field.

    Raises:
        ValidationError: If the cleaned value is shorter than min_length.
    """
    cleaned = sanitize_string(value, max_length)
    if len(cleaned) < min_length:
        if min_length <= 1:
            raise ValidationError(field, "This field is required")
        raise ValidationError(field, f"Must be at least {min_length} characters")
    return cleaned
