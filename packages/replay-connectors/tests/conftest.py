"""Pytest fixtures for replay-connectors tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from pixelreplay.connectors.base import BaseConnector
from pixelreplay.connectors.config import ConnectorConfig, ConnectorType
from pixelreplay.connectors.registry import ConnectorRegistry


class MockConnector(BaseConnector):
    """Mock connector for testing."""

    connector_type = ConnectorType.CSV

    def __init__(self, config: ConnectorConfig):
        super().__init__(config)
        self._mock_records: list[dict[str, Any]] = []
        self.closed = 0

    def authenticate(self) -> None:
        """Mock authentication."""
        self._authenticated = True
        self._client = "mock_client"

    def fetch_records(
        self,
        limit: int | None = None,
    ) -> Generator[dict[str, Any], None, None]:
        """Yield mock records."""
        records = self._mock_records
        if limit:
            records = records[:limit]
        yield from records

    def _cleanup_client(self) -> None:
        self.closed += 1

    def set_mock_records(self, records: list[dict[str, Any]]) -> None:
        """Set mock records for testing."""
        self._mock_records = records


@pytest.fixture
def connector_config() -> ConnectorConfig:
    """Create a test connector configuration."""
    return ConnectorConfig(
        connector_type=ConnectorType.CSV,
        name="Test Connector",
        connection_params={"path": "purchases.csv"},
    )


@pytest.fixture
def mock_connector(connector_config: ConnectorConfig) -> MockConnector:
    """Create a mock connector instance."""
    return MockConnector(connector_config)


@pytest.fixture
def fresh_registry() -> Generator[ConnectorRegistry, None, None]:
    """Create a fresh registry instance for testing.

    Resets the singleton after the test.
    """
    original = ConnectorRegistry._instance
    ConnectorRegistry._instance = None
    registry = ConnectorRegistry()
    yield registry
    ConnectorRegistry._instance = original


@pytest.fixture
def purchases_csv(tmp_path: Path) -> Path:
    """Write a small purchases export with mixed-case headers."""
    path = tmp_path / "purchases.csv"
    path.write_text(
        "Order_ID,Value,Event_Time,Email,Phone,UTM_Source\n"
        "A1,25.50,1736937000,a@b.com,,facebook\n"
        "A2,10,2025-01-15T10:30:00Z,,555-123-4567,\n"
        "A3,0,1736937000,c@d.com,,\n",
        encoding="utf-8",
    )
    return path
