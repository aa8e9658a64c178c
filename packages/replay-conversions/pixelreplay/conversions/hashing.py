"""PII hashing and deterministic identifiers."""

from __future__ import annotations

import hashlib
import zlib

EVENT_NAME = "Purchase"


def hash_pii(value: str) -> str:
    """
    Hash a personally identifiable value for the Conversions API.

    The value is trimmed and lower-cased before hashing so the same
    identity always produces the same digest.

    Args:
        value: Email, normalized phone or postal code

    Returns:
        SHA-256 hex digest
    """
    return hashlib.sha256(value.strip().lower().encode("utf-8")).hexdigest()


def event_id(namespace: str, order_id: str) -> str:
    """
    Build the deduplication identifier for a purchase.

    Repeated uploads of the same order to the same pixel or dataset get
    the same identifier, so the remote side deduplicates them.

    Args:
        namespace: Pixel id (web) or dataset id (offline)
        order_id: Source order identifier

    Returns:
        SHA-256 hex digest of "<namespace>|Purchase|<order_id>"
    """
    key = f"{namespace}|{EVENT_NAME}|{order_id}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def build_test_event_code(namespace: str) -> str:
    """Return the stable test event code for a pixel, e.g. TEST_1a2b3c4d."""
    checksum = zlib.crc32(namespace.encode("utf-8")) & 0xFFFFFFFF
    return f"TEST_{checksum:08x}"
