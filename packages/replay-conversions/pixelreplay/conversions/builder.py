"""
Event builders - turn raw purchase rows into Conversions API events.

Each builder handles one replay mode:
- WebEventBuilder: website events for a pixel (7 day window)
- OfflineEventBuilder: offline events for a dataset (62 day window)

A row that fails any eligibility check yields None and is counted as
skipped by the caller; nothing is ever partially built.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from pixelreplay.conversions.hashing import event_id, hash_pii
from pixelreplay.conversions.normalizer import (
    clean,
    first_present,
    normalize_phone,
    parse_timestamp,
    validate_email,
    validate_numeric,
)
from pixelreplay.conversions.schema import (
    ConversionEvent,
    MatchKeys,
    OfflineConversionEvent,
    ReplayMode,
    UserData,
    WebConversionEvent,
)

DEFAULT_CURRENCY = "USD"

# Any one of these marks a row as attributable to an ad interaction
ATTRIBUTION_FIELDS = ("fbc", "fbp", "fbclid", "utm_source")


@dataclass
class PurchaseFields:
    """Validated fields of one purchase row."""

    order_id: str
    value: float
    event_time: int
    currency: str = DEFAULT_CURRENCY
    email: str | None = None
    phone: str | None = None
    zip_code: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    source_url: str | None = None
    fbc: str | None = None
    fbp: str | None = None


def normalize_row(row: Mapping[str, Any]) -> PurchaseFields | None:
    """
    Extract and validate purchase fields from a raw row.

    Args:
        row: Mapping of lower-cased column name to raw value

    Returns:
        PurchaseFields, or None if the order id, value or event time is
        missing or invalid
    """
    order_id = clean(first_present(row, "order_id", "id"))
    if order_id is None:
        return None

    value = validate_numeric(first_present(row, "value", "amount"))
    if value is None:
        return None

    event_time = parse_timestamp(first_present(row, "event_time", "created_at"))
    if event_time is None:
        return None

    currency = clean(row.get("currency"))

    return PurchaseFields(
        order_id=order_id,
        value=value,
        event_time=event_time,
        currency=currency.upper() if currency else DEFAULT_CURRENCY,
        email=validate_email(row.get("email")),
        phone=normalize_phone(row.get("phone")),
        zip_code=clean(first_present(row, "zip", "zipcode")),
        ip_address=clean(first_present(row, "ip", "ip_address")),
        user_agent=clean(row.get("user_agent")),
        source_url=clean(first_present(row, "event_source_url", "source_url")),
        fbc=clean(row.get("fbc")),
        fbp=clean(row.get("fbp")),
    )


def is_within_window(event_time: datetime, window_days: int, now: datetime) -> bool:
    """
    Check that an event falls inside the trailing eligibility window.

    The lower bound (now - window_days) is inclusive; events after now
    are rejected.
    """
    return now - timedelta(days=window_days) <= event_time <= now


def has_attribution_signal(row: Mapping[str, Any]) -> bool:
    """Return True if the row carries a click id, browser id or UTM source."""
    return any(clean(row.get(key)) for key in ATTRIBUTION_FIELDS)


def _epoch_to_datetime(epoch: int) -> datetime | None:
    try:
        return datetime.fromtimestamp(epoch, UTC)
    except (OverflowError, OSError, ValueError):
        return None


class EventBuilder(ABC):
    """Base class for event builders."""

    mode: ReplayMode

    def __init__(self, namespace: str):
        """
        Initialize builder.

        Args:
            namespace: Pixel id or dataset id that scopes event ids
        """
        self.namespace = namespace

    @classmethod
    def for_mode(
        cls,
        mode: ReplayMode | str,
        namespace: str,
        strict_attribution: bool = True,
    ) -> EventBuilder:
        """
        Create the builder for a replay mode.

        Args:
            mode: Replay mode (or its string value)
            namespace: Pixel id (web) or dataset id (offline)
            strict_attribution: Require an attribution signal on web rows

        Returns:
            WebEventBuilder or OfflineEventBuilder
        """
        mode = ReplayMode(mode)
        if mode is ReplayMode.WEB:
            return WebEventBuilder(namespace, strict_attribution=strict_attribution)
        return OfflineEventBuilder(namespace)

    def build(
        self,
        row: Mapping[str, Any],
        now: datetime | None = None,
    ) -> ConversionEvent | None:
        """
        Build an event from a raw row.

        Args:
            row: Mapping of lower-cased column name to raw value
            now: Reference time for the eligibility window (default: current UTC time)

        Returns:
            The built event, or None if the row is ineligible
        """
        fields = normalize_row(row)
        if fields is None:
            return None

        event_time = _epoch_to_datetime(fields.event_time)
        if event_time is None:
            return None
        if not is_within_window(event_time, self.mode.window_days, now or datetime.now(UTC)):
            return None

        if not self._is_attributable(row):
            return None

        return self._assemble(fields)

    def _is_attributable(self, row: Mapping[str, Any]) -> bool:
        return True

    @abstractmethod
    def _assemble(self, fields: PurchaseFields) -> ConversionEvent:
        """Assemble the variant-specific event from validated fields."""
        pass  # pragma: no cover


class WebEventBuilder(EventBuilder):
    """
    Build website Purchase events for a pixel.

    With strict attribution on, rows without fbc, fbp, fbclid or
    utm_source are skipped.

    Example:
        builder = WebEventBuilder(pixel_id="123456")
        event = builder.build({
            "order_id": "A1",
            "value": "25.50",
            "event_time": "1736937000",
            "email": "a@b.com",
            "utm_source": "facebook",
        })
    """

    mode = ReplayMode.WEB

    def __init__(self, pixel_id: str, strict_attribution: bool = True):
        super().__init__(pixel_id)
        self.strict_attribution = strict_attribution

    def _is_attributable(self, row: Mapping[str, Any]) -> bool:
        if not self.strict_attribution:
            return True
        return has_attribution_signal(row)

    def _assemble(self, fields: PurchaseFields) -> WebConversionEvent:
        user_data = UserData(
            em=hash_pii(fields.email) if fields.email else None,
            ph=hash_pii(fields.phone) if fields.phone else None,
            zp=hash_pii(fields.zip_code) if fields.zip_code else None,
            client_ip_address=fields.ip_address,
            client_user_agent=fields.user_agent,
            fbc=fields.fbc,
            fbp=fields.fbp,
        )
        return WebConversionEvent(
            event_time=fields.event_time,
            event_id=event_id(self.namespace, fields.order_id),
            order_id=fields.order_id,
            value=fields.value,
            currency=fields.currency,
            event_source_url=fields.source_url,
            user_data=user_data,
        )


class OfflineEventBuilder(EventBuilder):
    """Build offline Purchase events for a dataset."""

    mode = ReplayMode.OFFLINE

    def __init__(self, dataset_id: str):
        super().__init__(dataset_id)

    def _assemble(self, fields: PurchaseFields) -> OfflineConversionEvent:
        match_keys = MatchKeys(
            em=hash_pii(fields.email) if fields.email else None,
            ph=hash_pii(fields.phone) if fields.phone else None,
            zp=hash_pii(fields.zip_code) if fields.zip_code else None,
            client_ip_address=fields.ip_address,
            client_user_agent=fields.user_agent,
        )
        return OfflineConversionEvent(
            event_time=fields.event_time,
            event_id=event_id(self.namespace, fields.order_id),
            order_id=fields.order_id,
            value=fields.value,
            currency=fields.currency,
            match_keys=match_keys,
        )


def build_events(
    rows: Iterable[Mapping[str, Any]],
    builder: EventBuilder,
    now: datetime | None = None,
) -> Iterator[tuple[Mapping[str, Any], ConversionEvent | None]]:
    """Lazily pair each row with its built event (None when ineligible)."""
    for row in rows:
        yield row, builder.build(row, now=now)
