"""Snowflake warehouse row source."""

from __future__ import annotations

import logging
import re
from collections.abc import Generator
from typing import Any

from pixelreplay.connectors.base import BaseConnector, lower_keys
from pixelreplay.connectors.config import ConnectorConfig, ConnectorType
from pixelreplay.connectors.exceptions import (
    AuthenticationError,
    ConnectorConfigError,
    SourceReadError,
)
from pixelreplay.connectors.registry import get_registry

logger = logging.getLogger(__name__)

# Pattern for valid SQL identifiers (optionally database/schema qualified)
_SQL_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*){0,2}$")


def _validate_identifier(name: str, identifier_type: str = "identifier") -> str:
    """Validate a SQL identifier (table name).

    Args:
        name: The identifier to validate.
        identifier_type: Type of identifier for error message (e.g., "table").

    Returns:
        The validated identifier.

    Raises:
        ValueError: If the identifier contains invalid characters.
    """
    if not _SQL_IDENTIFIER_PATTERN.match(name):
        raise ValueError(
            f"Invalid SQL {identifier_type}: '{name}'. "
            f"Must start with letter/underscore and contain only alphanumeric/underscore characters."
        )
    return name


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


class SnowflakeConnector(BaseConnector):
    """Row source for a Snowflake query.

    Typically runs the attribution query that joins orders to sessions
    and click identifiers, and streams its result set row by row.

    Required connection_params:
        - account: Snowflake account identifier (xxx.snowflakecomputing.com)
        - query: SQL to run verbatim, or
        - table: Table to read in full (validated identifier)

    Required credentials:
        - user: Snowflake username
        - password: Snowflake password

    Optional connection_params:
        - warehouse, database, schema (default: PUBLIC), role

    Example:
        config = ConnectorConfig(
            connector_type=ConnectorType.SNOWFLAKE,
            name="Attributed purchases",
            connection_params={
                "account": "acme.us-east-1.snowflakecomputing.com",
                "warehouse": "ANALYTICS_WH",
                "database": "ANALYTICS",
                "query": "SELECT * FROM attributed_purchases",
            },
            credentials={"user": "replay_service", "password": "..."},
        )
    """

    connector_type = ConnectorType.SNOWFLAKE

    def __init__(self, config: ConnectorConfig):
        """Initialize Snowflake connector."""
        super().__init__(config)
        params = config.connection_params
        if not params.get("account"):
            raise ConnectorConfigError("Snowflake connector requires 'account'")
        if not params.get("query") and not params.get("table"):
            raise ConnectorConfigError("Snowflake connector requires 'query' or 'table'")

    def authenticate(self) -> None:
        """Connect to Snowflake.

        Raises:
            AuthenticationError: If authentication fails.
            ImportError: If snowflake-connector-python is not installed.
        """
        try:
            import snowflake.connector
        except ImportError as e:
            raise ImportError(
                "snowflake-connector-python is required. "
                "Install with: pip install pixel-replay[snowflake]"
            ) from e

        params = self.config.connection_params
        creds = self.config.credentials

        try:
            self._client = snowflake.connector.connect(
                account=params["account"],
                user=creds.get("user"),
                password=creds.get("password"),
                warehouse=params.get("warehouse"),
                database=params.get("database"),
                schema=params.get("schema", "PUBLIC"),
                role=params.get("role"),
            )
            self._authenticated = True
            logger.info(f"Connected to Snowflake: {params['account']}")
        except Exception as e:
            raise AuthenticationError(f"Failed to authenticate with Snowflake: {e}") from e

    def build_query(self) -> str:
        """Return the SQL to execute for this source."""
        params = self.config.connection_params
        if params.get("query"):
            return str(params["query"])
        table = _validate_identifier(params["table"], "table")
        return f"SELECT * FROM {table}"

    def fetch_records(
        self,
        limit: int | None = None,
    ) -> Generator[dict[str, Any], None, None]:
        """Stream rows from the query result.

        Args:
            limit: Maximum rows to fetch.

        Yields:
            Row dictionaries keyed by lower-cased column name, values as strings.

        Raises:
            SourceReadError: If the query fails.
        """
        if not self.is_authenticated:
            self.authenticate()

        query = self.build_query()
        logger.debug(f"Executing Snowflake query: {query}")

        cursor = self._client.cursor()
        try:
            try:
                cursor.execute(query)
            except Exception as e:
                raise SourceReadError(f"Snowflake query failed: {e}") from e
            columns = [desc[0] for desc in cursor.description]

            count = 0
            for row in cursor:
                record = lower_keys(dict(zip(columns, row, strict=True)))
                yield {key: _to_text(value) for key, value in record.items()}
                count += 1

                if limit and count >= limit:
                    return
        finally:
            cursor.close()

    def _cleanup_client(self) -> None:
        """Close Snowflake connection."""
        if self._client:
            try:
                self._client.close()
            except Exception as e:
                logger.warning(f"Error closing Snowflake connection: {e}")


# Auto-register connector
get_registry().register(ConnectorType.SNOWFLAKE, SnowflakeConnector)
