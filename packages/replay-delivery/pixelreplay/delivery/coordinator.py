"""
Replay coordinator - drive rows through building, batching and delivery.

Rows are pulled one at a time from the source, so sources of any size
can be replayed. A failed batch is counted and logged and the run moves
on to the next batch; only configuration errors and row source errors
abort a run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pixelreplay.conversions import ConversionEvent, EventBuilder
from pixelreplay.delivery.batcher import Batcher
from pixelreplay.delivery.client import ConversionsAPIClient
from pixelreplay.delivery.config import ReplayConfig
from pixelreplay.delivery.exceptions import DeliveryError
from pixelreplay.delivery.summary import ReplaySummary, RunCounters

logger = logging.getLogger(__name__)


class ReplayCoordinator:
    """
    Run a replay from a row stream to the Conversions API.

    The configuration is validated on construction, before any row is
    read.

    Example:
        config = ReplayConfig(mode="offline62d", access_token="...", dataset_id="789")
        with ReplayCoordinator(config) as coordinator:
            summary = coordinator.run(source.rows())
        print(summary.to_json())
    """

    def __init__(
        self,
        config: ReplayConfig,
        client: ConversionsAPIClient | None = None,
        builder: EventBuilder | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize coordinator.

        Args:
            config: Replay configuration
            client: Delivery client (default: built from config)
            builder: Event builder (default: chosen from config.mode)
            sleep: Pause function applied after each batch

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        config.validate()
        self.config = config
        self.builder = builder or EventBuilder.for_mode(
            config.mode,
            config.namespace,
            strict_attribution=config.strict_attribution,
        )
        self._owns_client = client is None
        self.client = client or ConversionsAPIClient(config)
        self.counters = RunCounters()
        self._sleep = sleep

    def __enter__(self) -> ReplayCoordinator:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def run(
        self,
        rows: Iterable[Mapping[str, Any]],
        now: datetime | None = None,
    ) -> ReplaySummary:
        """
        Replay every row in the stream.

        Args:
            rows: Single-pass stream of rows keyed by lower-cased column name
            now: Fixed reference time for eligibility windows (default: current time per row)

        Returns:
            ReplaySummary with counters and duration
        """
        summary = ReplaySummary(
            mode=self.config.mode,
            started_at=datetime.now(UTC),
            counters=self.counters,
            test=self.config.is_test,
        )

        logger.info(f"Starting replay - Mode: {self.config.mode.value}")
        logger.info(
            f"Batch size: {self.config.batch_size}, Timeout: {self.config.timeout}s, "
            f"Test mode: {'ON' if self.config.is_test else 'OFF'}"
        )

        batcher = Batcher(flush=self._deliver, batch_size=self.config.batch_size)

        for row in rows:
            self.counters.processed += 1
            event = self.builder.build(row, now=now)
            if event is None:
                self.counters.skipped += 1
                continue
            self.counters.kept += 1
            batcher.add(event)

        batcher.close()

        summary.completed_at = datetime.now(UTC)
        logger.info(
            f"Replay completed in {summary.duration_seconds} seconds: "
            f"{self.counters.processed} processed, {self.counters.kept} kept, "
            f"{self.counters.sent} sent, {self.counters.skipped} skipped, "
            f"{self.counters.failed} failed"
        )
        return summary

    def _deliver(self, batch: list[ConversionEvent]) -> None:
        size = len(batch)
        logger.info(
            f"Sending batch of {size} events (Processed: {self.counters.processed}, "
            f"Kept: {self.counters.kept}, Skipped: {self.counters.skipped})"
        )
        try:
            self.client.send(batch)
        except DeliveryError as e:
            self.counters.failed += size
            logger.error(f"Batch failed: {e}")
        except Exception:
            self.counters.failed += size
            logger.exception("Batch failed with unexpected error")
        else:
            self.counters.sent += size
            logger.info(f"Batch sent successfully - Total sent: {self.counters.sent}")
        finally:
            self._sleep(self.config.pause_seconds)

    def close(self) -> None:
        """Close the delivery client if this coordinator created it."""
        if self._owns_client:
            self.client.close()


def run_replay(
    config: ReplayConfig,
    rows: Iterable[Mapping[str, Any]],
    now: datetime | None = None,
) -> ReplaySummary:
    """
    Run a replay with a default client and builder.

    Args:
        config: Replay configuration
        rows: Single-pass stream of rows
        now: Fixed reference time for eligibility windows

    Returns:
        ReplaySummary

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    with ReplayCoordinator(config) as coordinator:
        return coordinator.run(rows, now=now)
