"""
BatchStats - Statistics for one preview batch.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List

from .processing_outcome import OutcomeStatus, ProcessingOutcome


@dataclass
class BatchStats:
    """
    Statistics for a preview batch.

    Attributes:
        total_to_process: Items pulled from the pending list
        succeeded: Items whose previews were published
        skipped: Items without a preview (ignored/unknown type, no pages)
        failed: Items flagged as processing failed
        pages_published: Total pages published across items
        variants_published: Total preview images uploaded
        start_time: Start timestamp
        error_details: 'id: reason' entries for failed items
        skip_reasons: Count of skips per reason
    """
    total_to_process: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    pages_published: int = 0
    variants_published: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)
    skip_reasons: Dict[str, int] = field(default_factory=dict)

    def record(self, item_id: str, outcome: ProcessingOutcome) -> None:
        """Count a finished item."""
        if outcome.status is OutcomeStatus.SUCCEEDED:
            self.succeeded += 1
            self.pages_published += outcome.page_count
        elif outcome.status is OutcomeStatus.SKIPPED:
            self.skipped += 1
            self.skip_reasons[outcome.reason] = self.skip_reasons.get(outcome.reason, 0) + 1
        else:
            self.failed += 1
            detail = f"{item_id}: {outcome.reason}"
            if outcome.message:
                detail += f" ({outcome.message})"
            self.error_details.append(detail)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def completed_count(self) -> int:
        """Total completed (succeeded + skipped + failed)."""
        return self.succeeded + self.skipped + self.failed

    @property
    def remaining_count(self) -> int:
        """Remaining to process."""
        return self.total_to_process - self.completed_count

    @property
    def rate_per_minute(self) -> float:
        """Items completed per minute."""
        if self.elapsed_seconds > 0:
            return self.completed_count / self.elapsed_seconds * 60
        return 0.0
