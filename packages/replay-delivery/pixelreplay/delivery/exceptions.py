"""Custom exceptions for replay runs."""

from __future__ import annotations


class ReplayError(Exception):
    """Base exception for replay errors."""

    pass


class ConfigurationError(ReplayError):
    """Raised when a replay is misconfigured. Fatal before any row is read."""

    pass


class DeliveryError(ReplayError):
    """Raised when a batch is rejected or cannot reach the Conversions API."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        fbtrace_id: str | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.fbtrace_id = fbtrace_id
