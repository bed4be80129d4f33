"""Accumulated outcome of a bulk generation batch."""

from __future__ import annotations

import time
from collections import defaultdict
from datetime import datetime
from enum import Enum
from typing import Any, TypedDict

from episodeforge.models import BatchState, BulkResult


class ErrorCategory(str, Enum):
    """Where in the per-item pipeline a failure happened."""

    GENERATION = "generation"
    STORAGE = "storage"
    UNKNOWN = "unknown"


class ItemErrorInfo(TypedDict):
    """Structured error information for a failed item."""

    category: ErrorCategory
    message: str
    description: str
    timestamp: str


class BulkBatchReport:
    """Results from a bulk generation batch, in submission order."""

    def __init__(self, total_items: int = 0) -> None:
        """Initialize an empty report for ``total_items`` items."""
        self.total_items = total_items
        self.successful_items = 0
        self.failed_items = 0
        self.results: list[BulkResult] = []
        self.errors: dict[int, ItemErrorInfo] = {}
        self.state = BatchState.IDLE
        self.start_time = time.time()
        self.end_time: float | None = None

    def add_success(
        self, index: int, description: str, episode_ref: str, title: str | None
    ) -> BulkResult:
        """Record a successfully generated and stored episode."""
        result = BulkResult(
            index=index,
            description=description,
            succeeded=True,
            episode_ref=episode_ref,
            episode_title=title,
        )
        self.successful_items += 1
        self.results.append(result)
        return result

    def add_failure(
        self,
        index: int,
        description: str,
        error: Exception | str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
    ) -> BulkResult:
        """Record a failed item; the batch carries on with the next one."""
        message = error.message if hasattr(error, "message") else str(error)
        result = BulkResult(
            index=index, description=description, succeeded=False, error=message
        )
        self.failed_items += 1
        self.results.append(result)
        self.errors[index] = ItemErrorInfo(
            category=category,
            message=message,
            description=description,
            timestamp=datetime.now().isoformat(),
        )
        return result

    def finish(self, state: BatchState) -> None:
        """Mark the batch as ended in a terminal state."""
        self.state = state
        self.end_time = time.time()

    @property
    def processed_items(self) -> int:
        """Number of items attempted so far."""
        return len(self.results)

    @property
    def duration_seconds(self) -> float:
        """Wall-clock duration of the batch (so far, while running)."""
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    def to_dict(self) -> dict[str, Any]:
        """Convert results to dictionary."""
        duration = self.duration_seconds
        return {
            "state": self.state.value,
            "total_items": self.total_items,
            "processed_items": self.processed_items,
            "successful_items": self.successful_items,
            "failed_items": self.failed_items,
            "results": [result.to_payload() for result in self.results],
            "errors": {
                index: {**info, "category": info["category"].value}
                for index, info in self.errors.items()
            },
            "duration_seconds": duration,
            "items_per_second": self.processed_items / duration if duration > 0 else 0,
        }

    def get_error_summary(self) -> dict[ErrorCategory, list[int]]:
        """Group failed item indexes by error category."""
        summary: dict[ErrorCategory, list[int]] = defaultdict(list)
        for index, error in self.errors.items():
            summary[error["category"]].append(index)
        return dict(summary)
