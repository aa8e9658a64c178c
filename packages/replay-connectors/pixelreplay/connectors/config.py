"""Configuration models for row source connectors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConnectorType(str, Enum):
    """Supported row source types."""

    CSV = "csv"  # Flat file with a header row
    SNOWFLAKE = "snowflake"  # SQL query against a warehouse


@dataclass
class ConnectorConfig:
    """Configuration for a row source connector."""

    connector_type: ConnectorType
    name: str  # Human-readable name for this source

    # Authentication (repr=False to prevent credential exposure in logs)
    credentials: dict[str, Any] = field(default_factory=dict, repr=False)

    # Connection settings
    connection_params: dict[str, Any] = field(default_factory=dict)
