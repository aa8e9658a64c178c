"""Replay run configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from pixelreplay.conversions import ReplayMode
from pixelreplay.delivery.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v20.0"
DEFAULT_BATCH_SIZE = 400
DEFAULT_TIMEOUT = 30.0
DEFAULT_UPLOAD_TAG = "offline_backfill"
# Pause after each batch to stay under the API rate limits
DEFAULT_PAUSE_SECONDS = 0.25


@dataclass
class ReplayConfig:
    """
    Settings for one replay run.

    Web runs need a pixel id, offline runs a dataset id.

    Example:
        config = ReplayConfig(
            mode=ReplayMode.WEB,
            access_token="EAAB...",
            pixel_id="123456",
            test_mode=False,
        )
        config.validate()
    """

    mode: ReplayMode | str
    # repr=False to prevent token exposure in logs
    access_token: str = field(default="", repr=False)
    pixel_id: str | None = None
    dataset_id: str | None = None

    api_version: str = DEFAULT_API_VERSION
    base_url: str = DEFAULT_BASE_URL
    batch_size: int = DEFAULT_BATCH_SIZE
    timeout: float = DEFAULT_TIMEOUT
    pause_seconds: float = DEFAULT_PAUSE_SECONDS

    test_mode: bool = True  # Web only: send with a test event code
    strict_attribution: bool = True  # Web only: require fbc/fbp/fbclid/utm_source
    upload_tag: str = DEFAULT_UPLOAD_TAG  # Offline only

    def __post_init__(self) -> None:
        if self.mode and not isinstance(self.mode, ReplayMode):
            try:
                self.mode = ReplayMode(self.mode)
            except ValueError as e:
                valid = ", ".join(m.value for m in ReplayMode)
                raise ConfigurationError(f"Unknown mode '{self.mode}' (expected one of: {valid})") from e

    @property
    def namespace(self) -> str:
        """Pixel id for web runs, dataset id for offline runs."""
        value = self.pixel_id if self.mode is ReplayMode.WEB else self.dataset_id
        return value or ""

    @property
    def is_test(self) -> bool:
        """True if events are sent with a test event code."""
        return bool(self.test_mode) and self.mode is ReplayMode.WEB

    def validate(self) -> None:
        """
        Check required settings.

        Raises:
            ConfigurationError: If a required setting is missing or invalid
        """
        if not self.mode:
            raise ConfigurationError("Missing mode")
        if not self.access_token:
            raise ConfigurationError("Missing access_token")
        if self.mode is ReplayMode.WEB and not self.pixel_id:
            raise ConfigurationError("web7d requires pixel_id")
        if self.mode is ReplayMode.OFFLINE and not self.dataset_id:
            raise ConfigurationError("offline62d requires dataset_id")
        if self.batch_size < 1:
            raise ConfigurationError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.pause_seconds < 0:
            raise ConfigurationError(f"pause_seconds must not be negative, got {self.pause_seconds}")
