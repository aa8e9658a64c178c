"""Pytest fixtures for replay-delivery tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from pixelreplay.conversions import ReplayMode
from pixelreplay.delivery.config import ReplayConfig

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


def purchase_row(days_ago: float = 6, **overrides: Any) -> dict[str, Any]:
    """Build a raw purchase row relative to NOW."""
    row: dict[str, Any] = {
        "order_id": "A1",
        "value": "25.50",
        "event_time": str(int((NOW - timedelta(days=days_ago)).timestamp())),
        "email": "a@b.com",
        "utm_source": "x",
    }
    row.update(overrides)
    return row


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for eligibility windows."""
    return NOW


@pytest.fixture
def make_row():
    """Factory for raw purchase rows relative to the fixed reference time."""
    return purchase_row


@pytest.fixture
def web_config() -> ReplayConfig:
    """Web replay configuration in test mode."""
    return ReplayConfig(
        mode=ReplayMode.WEB,
        access_token="test-token",
        pixel_id="123456",
    )


@pytest.fixture
def offline_config() -> ReplayConfig:
    """Offline replay configuration."""
    return ReplayConfig(
        mode=ReplayMode.OFFLINE,
        access_token="test-token",
        dataset_id="789",
    )
