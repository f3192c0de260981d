"""
Input Validators

Validation for notes and sign-up data.
All validation functions raise ValueError with human-readable messages.
"""

import re
from typing import Any

MAX_NOTE_LENGTH = 5000
MIN_PASSWORD_LENGTH = 8

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_empty(value: Any) -> bool:
    """Check if value is None or empty string."""
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def validate_note_content(content: Any) -> str:
    """Return the trimmed note text."""
    if _is_empty(content) or not isinstance(content, str):
        raise ValueError("Please enter a note")

    content = content.strip()
    if len(content) > MAX_NOTE_LENGTH:
        raise ValueError(f"Notes are limited to {MAX_NOTE_LENGTH} characters")
    return content


def validate_signup(email: Any, password: Any) -> str:
    """Return the normalized email address."""
    if _is_empty(email) or not EMAIL_RE.match(email.strip()):
        raise ValueError("Please enter a valid email address")
    if _is_empty(password) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return email.strip().lower()
