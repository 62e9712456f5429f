"""
Phone number validation.

Numbers are stored and compared only in their normalized form: whitespace
and hyphens removed, optional leading "+" kept.
"""

import re
from typing import Any

from settings import PHONE_NUMBER_PATTERN

_PHONE_RE = re.compile(PHONE_NUMBER_PATTERN)
_SEPARATORS_RE = re.compile(r"[\s-]")


class PhoneNumberError(ValueError):
    """Raised when a phone number string has an invalid format."""

    def __init__(self, message: str = "Invalid phone number format") -> None:
        super().__init__(message)


def validate_phone_number(raw: Any) -> str:
    """
    Validate a raw phone number and return its normalized form.

    Args:
        raw: Phone number string (may contain spaces and hyphens)

    Returns:
        The number with whitespace and hyphens stripped, e.g. "+12345678900".

    Raises:
        PhoneNumberError: if ``raw`` is not a string matching the whole pattern.
    """
    if not isinstance(raw, str) or _PHONE_RE.fullmatch(raw) is None:
        raise PhoneNumberError()
    return _SEPARATORS_RE.sub("", raw)


def is_valid_phone_number(raw: Any) -> bool:
    try:
        validate_phone_number(raw)
    except PhoneNumberError:
        return False
    return True
