"""Pixel Replay Row Sources.

This package provides connectors that stream purchase rows for replay:
- Flat files (CSV exports)
- Data warehouses (Snowflake queries)

Every connector yields dictionaries keyed by lower-cased column name,
one row at a time.

Example:
    from pixelreplay.connectors import create_row_source

    source = create_row_source(csv_path="purchases.csv")
    with source:
        for row in source.rows():
            print(row["order_id"])
"""

from pixelreplay.connectors.base import BaseConnector
from pixelreplay.connectors.config import ConnectorConfig, ConnectorType
from pixelreplay.connectors.exceptions import (
    AuthenticationError,
    ConnectorConfigError,
    ConnectorConnectionError,
    ConnectorError,
    SourceReadError,
)
from pixelreplay.connectors.registry import ConnectorRegistry, get_registry
from pixelreplay.connectors.sources import create_row_source

__all__ = [
    # Base
    "BaseConnector",
    # Config
    "ConnectorConfig",
    "ConnectorType",
    # Exceptions
    "AuthenticationError",
    "ConnectorConfigError",
    "ConnectorConnectionError",
    "ConnectorError",
    "SourceReadError",
    # Registry
    "ConnectorRegistry",
    "get_registry",
    "create_row_source",
]
