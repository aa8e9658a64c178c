"""
Conversions API client - submit event batches to a pixel or dataset.

A batch is accepted or rejected as a whole: an error object in the
response fails the entire batch, warnings are logged and returned.
There is no retry; callers decide what a failed batch means.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from pixelreplay.conversions import ConversionEvent, ReplayMode, build_test_event_code
from pixelreplay.delivery.config import ReplayConfig
from pixelreplay.delivery.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    """Outcome of a delivered batch."""

    SUCCESS = "success"
    WARNING = "warning"  # Accepted, but the API reported warnings


@dataclass
class DeliveryOutcome:
    """Result of sending one batch."""

    status: DeliveryStatus
    events_sent: int
    events_received: int | None = None
    warnings: list[str] = field(default_factory=list)
    fbtrace_id: str | None = None
    response: dict[str, Any] = field(default_factory=dict)


class ConversionsAPIClient:
    """
    Client for the Meta Conversions API events endpoint.

    POSTs to {base_url}/{api_version}/{namespace}/events with the access
    token and event payloads in the JSON body.

    Example:
        config = ReplayConfig(mode="web7d", access_token="...", pixel_id="123456")
        with ConversionsAPIClient(config) as client:
            outcome = client.send(events)
    """

    def __init__(
        self,
        config: ReplayConfig,
        client: httpx.Client | None = None,
    ):
        """
        Initialize client.

        Args:
            config: Replay configuration (mode, namespace, token, timeout)
            client: Optional pre-built httpx client; one is created if omitted
        """
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=f"{config.base_url.rstrip('/')}/{config.api_version}/",
            timeout=config.timeout,
        )

    def __enter__(self) -> ConversionsAPIClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def endpoint(self) -> str:
        """Path of the events endpoint, relative to the API version root."""
        return f"{self.config.namespace}/events"

    def build_body(self, events: Sequence[ConversionEvent]) -> dict[str, Any]:
        """
        Build the JSON request body for a batch.

        Web runs in test mode add a test_event_code derived from the
        pixel id; offline runs add the upload tag.
        """
        body: dict[str, Any] = {
            "access_token": self.config.access_token,
            "data": [event.to_payload() for event in events],
        }
        if self.config.mode is ReplayMode.WEB:
            if self.config.is_test:
                body["test_event_code"] = build_test_event_code(self.config.namespace)
        else:
            body["upload_tag"] = self.config.upload_tag
        return body

    def send(self, events: Sequence[ConversionEvent]) -> DeliveryOutcome:
        """
        Send one batch of events.

        Args:
            events: Events to submit

        Returns:
            DeliveryOutcome with warnings, if any

        Raises:
            DeliveryError: On transport failure, timeout, a non-JSON response,
                an error object in the response, or an HTTP error status
        """
        body = self.build_body(events)

        try:
            response = self._client.post(self.endpoint, json=body)
        except httpx.HTTPError as e:
            raise DeliveryError(f"Request to Conversions API failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise DeliveryError(
                f"Invalid JSON response from Conversions API (HTTP {response.status_code})"
            ) from e
        if not isinstance(data, dict):
            data = {}

        error = data.get("error")
        if error:
            if not isinstance(error, dict):
                error = {"message": str(error)}
            raise DeliveryError(
                f"Facebook API Error: {error.get('message')} (Code: {error.get('code')})",
                code=error.get("code"),
                fbtrace_id=error.get("fbtrace_id"),
            )

        if response.is_error:
            raise DeliveryError(f"Conversions API returned HTTP {response.status_code}")

        warnings = [
            str(message.get("message", ""))
            for message in data.get("messages") or []
            if isinstance(message, dict) and message.get("type") == "warning"
        ]
        for warning in warnings:
            logger.warning(f"API Warning: {warning}")

        return DeliveryOutcome(
            status=DeliveryStatus.WARNING if warnings else DeliveryStatus.SUCCESS,
            events_sent=len(events),
            events_received=data.get("events_received"),
            warnings=warnings,
            fbtrace_id=data.get("fbtrace_id"),
            response=data,
        )

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()
