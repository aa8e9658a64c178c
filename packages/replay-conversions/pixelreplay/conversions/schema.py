"""
Conversion event schema - payloads for the Meta Conversions API.

Two event variants share the same conceptual shape:
- WebConversionEvent: website events sent to a pixel (7 day window)
- OfflineConversionEvent: offline events sent to a dataset (62 day window)

Optional fields left as None are omitted from the payload entirely,
never emitted as null.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pixelreplay.conversions.hashing import EVENT_NAME


class ReplayMode(str, Enum):
    """Replay mode, selecting the event variant for a whole run."""

    WEB = "web7d"  # Website events to a pixel
    OFFLINE = "offline62d"  # Offline events to a dataset

    @property
    def window_days(self) -> int:
        """Trailing eligibility window in days."""
        return 7 if self is ReplayMode.WEB else 62


class ActionSource(str, Enum):
    """Conversions API action sources used by the replay."""

    WEBSITE = "website"
    OTHER = "other"


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class UserData:
    """
    Identity signals for a web event.

    em/ph/zp hold SHA-256 digests and are sent as one-element lists.
    IP, user agent and browser cookies are sent raw.
    """

    em: str | None = None
    ph: str | None = None
    zp: str | None = None
    client_ip_address: str | None = None
    client_user_agent: str | None = None
    fbc: str | None = None
    fbp: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Convert to the user_data mapping."""
        return _drop_none({
            "em": [self.em] if self.em else None,
            "ph": [self.ph] if self.ph else None,
            "zp": [self.zp] if self.zp else None,
            "client_ip_address": self.client_ip_address,
            "client_user_agent": self.client_user_agent,
            "fbc": self.fbc,
            "fbp": self.fbp,
        })


@dataclass
class MatchKeys:
    """Identity signals for an offline event (hashed scalars plus raw IP/UA)."""

    em: str | None = None
    ph: str | None = None
    zp: str | None = None
    client_ip_address: str | None = None
    client_user_agent: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Convert to the match_keys mapping."""
        return _drop_none({
            "em": self.em,
            "ph": self.ph,
            "zp": self.zp,
            "client_ip_address": self.client_ip_address,
            "client_user_agent": self.client_user_agent,
        })


@dataclass
class WebConversionEvent:
    """
    Website purchase event.

    Example:
        event = WebConversionEvent(
            event_time=1736937000,
            event_id=event_id("123456", "A1"),
            order_id="A1",
            value=25.50,
            user_data=UserData(em=hash_pii("a@b.com")),
        )
        event.to_payload()["custom_data"]
        # {"currency": "USD", "value": 25.5, "order_id": "A1"}
    """

    event_time: int
    event_id: str
    order_id: str
    value: float
    currency: str = "USD"
    event_source_url: str | None = None
    user_data: UserData = field(default_factory=UserData)
    event_name: str = EVENT_NAME
    action_source: ActionSource = ActionSource.WEBSITE

    def to_payload(self) -> dict[str, Any]:
        """Convert to the JSON object sent in the request's data list."""
        return _drop_none({
            "event_name": self.event_name,
            "event_time": self.event_time,
            "action_source": self.action_source.value,
            "event_source_url": self.event_source_url,
            "event_id": self.event_id,
            "user_data": self.user_data.to_payload(),
            "custom_data": {
                "currency": self.currency,
                "value": self.value,
                "order_id": self.order_id,
            },
        })


@dataclass
class OfflineConversionEvent:
    """Offline purchase event."""

    event_time: int
    event_id: str
    order_id: str
    value: float
    currency: str = "USD"
    match_keys: MatchKeys = field(default_factory=MatchKeys)
    event_name: str = EVENT_NAME
    action_source: ActionSource = ActionSource.OTHER

    def to_payload(self) -> dict[str, Any]:
        """Convert to the JSON object sent in the request's data list."""
        return {
            "event_name": self.event_name,
            "event_time": self.event_time,
            "value": self.value,
            "currency": self.currency,
            "order_id": self.order_id,
            "match_keys": self.match_keys.to_payload(),
            "event_id": self.event_id,
            "action_source": self.action_source.value,
        }


ConversionEvent = WebConversionEvent | OfflineConversionEvent
