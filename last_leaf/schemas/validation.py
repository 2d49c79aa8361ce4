"""Shared input rules used by the request schemas."""

import re
from typing import Any

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 8

CONTENT_REQUIRED_MESSAGE = "Content is required and cannot be empty"


def is_valid_email(email: Any) -> bool:
    """Check an optional email value.

    Missing or empty values are valid because contact emails are optional.
    """
    if email is None or email == "":
        return True
    if not isinstance(email, str):
        return False
    return EMAIL_REGEX.match(email) is not None


def is_blank(value: Any) -> bool:
    """True when value is not a string with at least one non-space character."""
    return not isinstance(value, str) or value.strip() == ""
