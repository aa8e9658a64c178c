"""Shared pytest fixtures for Pixel Replay packages."""

import pytest
from unittest.mock import MagicMock, patch

import httpx


@pytest.fixture
def graph_api():
    """Mock httpx.Client for Conversions API calls."""
    with patch("httpx.Client") as mock:
        client = MagicMock()
        client.post.return_value = httpx.Response(200, json={"events_received": 1, "fbtrace_id": "trace"})
        mock.return_value = client
        yield client


@pytest.fixture
def sample_purchase_rows():
    """Sample purchase rows as exported from a storefront."""
    return [
        {
            "order_id": "A1",
            "value": "25.50",
            "event_time": "1748692800",
            "currency": "usd",
            "email": " A@B.com ",
            "phone": "(555) 123-4567",
            "utm_source": "facebook",
        },
        {
            "id": "A2",
            "amount": "10",
            "created_at": "2025-05-30T08:15:00Z",
            "fbp": "fb.1.1748590000.123",
        },
        {
            "order_id": "A3",
            "value": "0",
            "event_time": "1748692800",
            "fbc": "fb.1.1748590000.abc",
        },
    ]
