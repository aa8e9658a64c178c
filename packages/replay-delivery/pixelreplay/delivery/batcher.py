"""Batch accumulation for event delivery."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Batcher:
    """
    Accumulate events and hand them off in fixed-size batches.

    The batch is cleared after every flush attempt, whether the flush
    callback returns or raises. close() flushes any residual partial batch.

    Example:
        batcher = Batcher(flush=client.send, batch_size=400)
        for event in events:
            batcher.add(event)
        batcher.close()
    """

    def __init__(
        self,
        flush: Callable[[list[Any]], Any],
        batch_size: int = 400,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self._flush = flush
        self.batch_size = batch_size
        self._batch: list[Any] = []
        self.flush_count = 0

    def __len__(self) -> int:
        return len(self._batch)

    def add(self, event: Any) -> None:
        """Add an event, flushing when the batch is full."""
        self._batch.append(event)
        if len(self._batch) >= self.batch_size:
            self.flush()

    def flush(self) -> None:
        """Flush the current batch if it is not empty."""
        if not self._batch:
            return
        batch, self._batch = self._batch, []
        self.flush_count += 1
        logger.debug(f"Flushing batch {self.flush_count} with {len(batch)} events")
        self._flush(batch)

    def close(self) -> None:
        """Flush the residual partial batch."""
        self.flush()
