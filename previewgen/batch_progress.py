"""
BatchProgress - Per-item console output during a batch.
"""

import logging
from typing import Optional

from .batch_stats import BatchStats
from .processing_outcome import OutcomeStatus, ProcessingOutcome
from .work_item import WorkItem


class BatchProgress:
    """
    Prints one line per finished item, and periodic summaries otherwise.
    """

    LABELS = {
        OutcomeStatus.SUCCEEDED: 'OK',
        OutcomeStatus.SKIPPED: 'SKIP',
        OutcomeStatus.FAILED: 'ERROR',
    }

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 25,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each item as it finishes
            log_interval: Log summary progress every N items (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_item_finished(self, item: WorkItem, outcome: ProcessingOutcome) -> None:
        """Called after an item reaches a terminal state."""
        if self.show_files:
            name = item.filename or item.id
            print(f"  [{self.LABELS[outcome.status]}] {name} -> {outcome.describe()}")

    def on_progress_update(self, stats: BatchStats) -> None:
        """Called after each item to report overall progress."""
        done = stats.completed_count
        if not self.show_files and done - self.last_logged >= self.log_interval:
            self.last_logged = done
            self.logger.info(
                f"Progress: {stats.succeeded} published, {stats.skipped} skipped, "
                f"{stats.failed} failed ({stats.remaining_count} left)"
            )

    def __call__(self, stats: BatchStats) -> None:
        """Allow use as callback for stats updates."""
        self.on_progress_update(stats)
