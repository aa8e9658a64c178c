"""
Pixel Replay Delivery - batch and submit events to the Conversions API.

Provides:
- ReplayConfig: mode, namespace, credentials and delivery settings
- Batcher: fixed-size batches with a final partial flush
- ConversionsAPIClient: one POST per batch, no retry
- ReplayCoordinator: row stream to summary, failures isolated per batch

Usage:
    from pixelreplay.connectors import create_row_source
    from pixelreplay.delivery import ReplayConfig, run_replay

    config = ReplayConfig(mode="web7d", access_token="...", pixel_id="123456")
    with create_row_source(csv_path="purchases.csv") as source:
        summary = run_replay(config, source.rows())
    print(summary.to_json())
"""

from pixelreplay.delivery.batcher import Batcher
from pixelreplay.delivery.client import (
    ConversionsAPIClient,
    DeliveryOutcome,
    DeliveryStatus,
)
from pixelreplay.delivery.config import ReplayConfig
from pixelreplay.delivery.coordinator import ReplayCoordinator, run_replay
from pixelreplay.delivery.exceptions import (
    ConfigurationError,
    DeliveryError,
    ReplayError,
)
from pixelreplay.delivery.summary import ReplaySummary, RunCounters

__all__ = [
    # Config
    "ReplayConfig",
    # Batching and delivery
    "Batcher",
    "ConversionsAPIClient",
    "DeliveryOutcome",
    "DeliveryStatus",
    # Coordination
    "ReplayCoordinator",
    "ReplaySummary",
    "RunCounters",
    "run_replay",
    # Exceptions
    "ConfigurationError",
    "DeliveryError",
    "ReplayError",
]
