"""
Pixel Replay Conversions - purchase rows to Conversions API events.

Provides:
- Field normalizers (email, phone, amount, timestamp)
- PII hashing and deterministic event ids
- Web and offline event schemas
- Event builders with window and attribution eligibility rules

Usage:
    from pixelreplay.conversions import EventBuilder, ReplayMode

    builder = EventBuilder.for_mode(ReplayMode.WEB, namespace="123456")
    event = builder.build(row)
    if event is not None:
        payload = event.to_payload()
"""

from pixelreplay.conversions.builder import (
    EventBuilder,
    OfflineEventBuilder,
    PurchaseFields,
    WebEventBuilder,
    build_events,
    is_within_window,
    normalize_row,
)
from pixelreplay.conversions.hashing import build_test_event_code, event_id, hash_pii
from pixelreplay.conversions.normalizer import (
    normalize_phone,
    parse_timestamp,
    validate_email,
    validate_numeric,
)
from pixelreplay.conversions.schema import (
    ActionSource,
    ConversionEvent,
    MatchKeys,
    OfflineConversionEvent,
    ReplayMode,
    UserData,
    WebConversionEvent,
)

__all__ = [
    # Schema
    "ActionSource",
    "ConversionEvent",
    "MatchKeys",
    "OfflineConversionEvent",
    "ReplayMode",
    "UserData",
    "WebConversionEvent",
    # Normalizers
    "normalize_phone",
    "parse_timestamp",
    "validate_email",
    "validate_numeric",
    # Hashing
    "build_test_event_code",
    "event_id",
    "hash_pii",
    # Builders
    "EventBuilder",
    "OfflineEventBuilder",
    "PurchaseFields",
    "WebEventBuilder",
    "build_events",
    "is_within_window",
    "normalize_row",
]
