"""Flat file (CSV) row source."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pandas as pd

from pixelreplay.connectors.base import BaseConnector, lower_keys
from pixelreplay.connectors.config import ConnectorConfig, ConnectorType
from pixelreplay.connectors.exceptions import (
    ConnectorConfigError,
    ConnectorConnectionError,
    SourceReadError,
)
from pixelreplay.connectors.registry import get_registry

logger = logging.getLogger(__name__)

DEFAULT_CHUNKSIZE = 10_000


class CSVConnector(BaseConnector):
    """Row source for a CSV export with a header row.

    The file is read in chunks so only one chunk is in memory at a time.
    Every cell is kept as a string; empty cells become None.

    Required connection_params:
        - path: Path to the CSV file

    Optional connection_params:
        - chunksize: Rows per chunk (default: 10000)
        - delimiter: Field delimiter (default: ",")
        - encoding: File encoding (default: utf-8)

    Example:
        config = ConnectorConfig(
            connector_type=ConnectorType.CSV,
            name="Shopify orders export",
            connection_params={"path": "orders.csv"},
        )
    """

    connector_type = ConnectorType.CSV

    def __init__(self, config: ConnectorConfig):
        """Initialize CSV connector."""
        super().__init__(config)
        if not config.connection_params.get("path"):
            raise ConnectorConfigError("CSV connector requires 'path'")
        self.path = Path(config.connection_params["path"])

    def authenticate(self) -> None:
        """Check that the file exists and is readable.

        Raises:
            ConnectorConnectionError: If the file cannot be found.
        """
        if not self.path.is_file():
            raise ConnectorConnectionError(f"CSV file not found: {self.path}")
        self._client = self.path
        self._authenticated = True
        logger.info(f"Opened CSV source: {self.path}")

    def fetch_records(
        self,
        limit: int | None = None,
    ) -> Generator[dict[str, Any], None, None]:
        """Stream rows from the CSV file.

        Args:
            limit: Maximum rows to fetch.

        Yields:
            Row dictionaries keyed by lower-cased header name.

        Raises:
            SourceReadError: If the file is empty or malformed.
        """
        if not self.is_authenticated:
            self.authenticate()

        params = self.config.connection_params
        count = 0

        try:
            with pd.read_csv(
                self.path,
                dtype=str,
                keep_default_na=False,
                chunksize=int(params.get("chunksize", DEFAULT_CHUNKSIZE)),
                sep=params.get("delimiter", ","),
                encoding=params.get("encoding", "utf-8"),
            ) as reader:
                for chunk in reader:
                    for record in chunk.to_dict(orient="records"):
                        row = lower_keys(record)
                        yield {key: (value if value != "" else None) for key, value in row.items()}
                        count += 1

                        if limit and count >= limit:
                            return
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise SourceReadError(f"Failed to read CSV file {self.path}: {e}") from e

        logger.debug(f"Read {count} rows from {self.path}")


# Auto-register connector
get_registry().register(ConnectorType.CSV, CSVConnector)
