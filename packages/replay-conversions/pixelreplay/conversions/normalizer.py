"""
Field normalizers - validate and coerce raw row values.

Every function here is total: invalid or missing input yields None
instead of raising, so a row either normalizes completely or is skipped.

Rows arrive as mappings of lower-cased column name to string (or None),
with several accepted aliases per field:
- order_id | id
- value | amount
- event_time | created_at
- zip | zipcode
- ip | ip_address
- event_source_url | source_url
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

import pandas as pd

_EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}$"
)

_NUMERIC_PATTERN = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$")

_NON_DIGITS = re.compile(r"\D+")

MIN_PHONE_DIGITS = 10


def clean(value: Any) -> str | None:
    """Return the stripped string form of value, or None if blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def first_present(row: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first alias present in row with a non-null value."""
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def validate_email(value: str | None) -> str | None:
    """
    Validate an email address.

    Args:
        value: Raw email string

    Returns:
        Trimmed email if it is a well-formed address, otherwise None
    """
    email = clean(value)
    if email is None:
        return None
    return email if _EMAIL_PATTERN.match(email) else None


def validate_numeric(value: str | None) -> float | None:
    """
    Parse a purchase value.

    Zero and negative amounts are treated as invalid rather than as
    zero-valued purchases.

    Args:
        value: Raw numeric string

    Returns:
        Positive finite float, otherwise None
    """
    if value is None:
        return None
    text = str(value)
    if not _NUMERIC_PATTERN.match(text):
        return None
    number = float(text)
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def normalize_phone(value: str | None) -> str | None:
    """
    Normalize a phone number to an E.164-like string.

    Country codes are not validated beyond the digit count.

    Examples:
        >>> normalize_phone("(555) 123-4567")
        '+5551234567'
        >>> normalize_phone("1-555-123-4567")
        '+15551234567'
        >>> normalize_phone("123-4567") is None
        True
    """
    if not value:
        return None
    digits = _NON_DIGITS.sub("", str(value))
    if len(digits) < MIN_PHONE_DIGITS:
        return None

    return f"+{digits}"


def parse_timestamp(value: str | None) -> int | None:
    """
    Parse an event time into integer epoch seconds.

    Purely numeric input is taken as an epoch value. Anything else goes
    through pandas' date parser; strings without an offset are read as UTC.

    Args:
        value: Raw timestamp string

    Returns:
        Epoch seconds, or None if empty or unparseable
    """
    text = clean(value)
    if text is None:
        return None

    if _NUMERIC_PATTERN.match(text):
        number = float(text)
        if not math.isfinite(number):
            return None
        return int(number)

    try:
        parsed = pd.to_datetime(text, utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return int(parsed.timestamp())
