"""Run counters and the end-of-run summary."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pixelreplay.conversions import ReplayMode


@dataclass
class RunCounters:
    """Counters for one replay run. Only ever incremented."""

    processed: int = 0
    kept: int = 0
    skipped: int = 0
    sent: int = 0
    failed: int = 0


@dataclass
class ReplaySummary:
    """Result of a replay run."""

    mode: ReplayMode
    started_at: datetime
    counters: RunCounters = field(default_factory=RunCounters)
    test: bool = False
    completed_at: datetime | None = None

    @property
    def duration_seconds(self) -> int | None:
        """Return run duration in whole seconds."""
        if self.started_at and self.completed_at:
            return int((self.completed_at - self.started_at).total_seconds())
        return None

    @property
    def success(self) -> bool:
        """True if no batch failed."""
        return self.counters.failed == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the summary record."""
        return {
            "mode": self.mode.value,
            "processed": self.counters.processed,
            "kept": self.counters.kept,
            "sent": self.counters.sent,
            "skipped": self.counters.skipped,
            "failed": self.counters.failed,
            "test": self.test,
            "duration": self.duration_seconds,
            "success": self.success,
        }

    def to_json(self) -> str:
        """Serialize the summary record as indented JSON."""
        return json.dumps(self.to_dict(), indent=4)
