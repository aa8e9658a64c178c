"""Row source selection."""

from __future__ import annotations

import logging
from typing import Any

import pixelreplay.connectors.adapters  # noqa: F401
from pixelreplay.connectors.base import BaseConnector
from pixelreplay.connectors.config import ConnectorConfig, ConnectorType
from pixelreplay.connectors.exceptions import ConnectorConfigError
from pixelreplay.connectors.registry import get_registry

logger = logging.getLogger(__name__)

_SNOWFLAKE_CREDENTIAL_KEYS = ("user", "password")


def create_row_source(
    csv_path: str | None = None,
    snowflake: dict[str, Any] | None = None,
) -> BaseConnector:
    """Create the row source for a replay run.

    A CSV path takes precedence over Snowflake settings when both are given.

    Args:
        csv_path: Path to a CSV export.
        snowflake: Snowflake settings: account, user, password, query (or
            table), and optionally warehouse, database, schema, role.

    Returns:
        Connector ready to stream rows.

    Raises:
        ConnectorConfigError: If no source is specified or settings are incomplete.

    Example:
        source = create_row_source(csv_path="purchases.csv")
        with source:
            for row in source.rows():
                ...
    """
    if csv_path:
        config = ConnectorConfig(
            connector_type=ConnectorType.CSV,
            name=f"CSV {csv_path}",
            connection_params={"path": csv_path},
        )
    elif snowflake:
        settings = dict(snowflake)
        credentials = {key: settings.pop(key, None) for key in _SNOWFLAKE_CREDENTIAL_KEYS}
        missing = [key for key, value in credentials.items() if not value]
        if missing:
            raise ConnectorConfigError(f"Snowflake source requires {', '.join(missing)}")
        config = ConnectorConfig(
            connector_type=ConnectorType.SNOWFLAKE,
            name=f"Snowflake {settings.get('account', '')}".strip(),
            credentials=credentials,
            connection_params=settings,
        )
    else:
        raise ConnectorConfigError(
            "No row source specified: provide a CSV path or Snowflake settings "
            "(account, user, password, query)"
        )

    logger.debug(f"Creating row source: {config.name}")
    return get_registry().create(config)
