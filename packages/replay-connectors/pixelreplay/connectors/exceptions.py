"""Custom exceptions for row source connectors."""

from __future__ import annotations


class ConnectorError(Exception):
    """Base exception for connector errors."""

    pass


class ConnectorConfigError(ConnectorError, ValueError):
    """Raised when a connector is missing required settings."""

    pass


class AuthenticationError(ConnectorError):
    """Raised when authentication fails."""

    pass


class ConnectorConnectionError(ConnectorError):
    """Raised when connection to external system fails."""

    pass


class SourceReadError(ConnectorError):
    """Raised when rows cannot be read from the source."""

    pass
