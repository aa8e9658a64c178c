"""Base connector abstract class."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Generator
from typing import Any

from pixelreplay.connectors.config import ConnectorConfig, ConnectorType

logger = logging.getLogger(__name__)


def lower_keys(record: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of record with lower-cased column names."""
    return {str(key).lower(): value for key, value in record.items()}


class BaseConnector(ABC):
    """Abstract base class for row sources.

    A row source yields purchase rows one at a time as dictionaries keyed
    by lower-cased column name. Rows are never materialized as a list, so
    files and result sets of any size can be replayed.

    Subclasses must implement:
    - authenticate(): Open the file or connect to the external system
    - fetch_records(): Yield raw rows from the source

    Subclasses must set the class attribute:
    - connector_type: The ConnectorType enum value for this connector

    Optional overrides:
    - _cleanup_client(): Custom cleanup logic for the client connection

    Can be used as a context manager:
        with CSVConnector(config) as connector:
            for row in connector.rows():
                ...
    """

    connector_type: ConnectorType

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Validate that subclasses define connector_type."""
        super().__init_subclass__(**kwargs)
        # Skip validation for abstract subclasses
        if ABC in cls.__bases__:
            return
        if not hasattr(cls, "connector_type") or cls.connector_type is None:
            raise TypeError(
                f"{cls.__name__} must define a 'connector_type' class attribute"
            )

    def __init__(self, config: ConnectorConfig):
        """Initialize connector with configuration.

        Args:
            config: Connector configuration including credentials and settings.
        """
        self.config = config
        self._client: Any = None
        self._authenticated = False

    def __enter__(self) -> BaseConnector:
        """Enter context manager."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager and cleanup resources."""
        self.close()

    @property
    def is_authenticated(self) -> bool:
        """Return True if connector is authenticated."""
        return self._authenticated

    @abstractmethod
    def authenticate(self) -> None:
        """Authenticate with (or open) the source.

        Raises:
            AuthenticationError: If authentication fails.
        """
        pass  # pragma: no cover

    @abstractmethod
    def fetch_records(
        self,
        limit: int | None = None,
    ) -> Generator[dict[str, Any], None, None]:
        """Yield raw rows from the source.

        Args:
            limit: Maximum rows to fetch.

        Yields:
            Row dictionaries keyed by lower-cased column name.
        """
        pass  # pragma: no cover

    def _cleanup_client(self) -> None:  # noqa: B027
        """Clean up the client connection.

        Override this method in subclasses to implement custom cleanup logic
        (e.g., closing database cursors, releasing file handles).

        This is called by close() before resetting internal state.
        """
        pass

    def rows(self, limit: int | None = None) -> Generator[dict[str, Any], None, None]:
        """Authenticate if needed, then stream rows from the source.

        Args:
            limit: Maximum rows to fetch.

        Yields:
            Row dictionaries keyed by lower-cased column name.
        """
        if not self.is_authenticated:
            self.authenticate()
        logger.info(f"Reading rows from {self.config.name}")
        yield from self.fetch_records(limit=limit)

    def test_connection(self) -> bool:
        """Test if the connection is valid.

        Returns:
            True if connection is successful.
        """
        try:
            self.authenticate()
            return True
        except Exception as e:
            logger.warning(f"Connection test failed for {self.config.name}: {e}")
            return False

    def close(self) -> None:
        """Close the connection and cleanup resources."""
        logger.debug(f"Closing connector: {self.config.name}")
        self._cleanup_client()
        self._client = None
        self._authenticated = False
