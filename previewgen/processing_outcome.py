"""
ProcessingOutcome - Terminal state of one work item.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutcomeStatus(str, Enum):
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    SKIPPED = 'skipped'


@dataclass(frozen=True)
class ProcessingOutcome:
    """
    Result of processing a single work item.

    Attributes:
        status: Succeeded, failed or skipped
        reason: Short machine-readable reason for failures and skips
        page_count: Number of pages published (succeeded only)
        message: Human-readable detail for logs
    """
    status: OutcomeStatus
    reason: Optional[str] = None
    page_count: int = 0
    message: Optional[str] = None

    @classmethod
    def succeeded(cls, page_count: int) -> 'ProcessingOutcome':
        return cls(OutcomeStatus.SUCCEEDED, page_count=page_count)

    @classmethod
    def failed(cls, reason: str, message: Optional[str] = None) -> 'ProcessingOutcome':
        return cls(OutcomeStatus.FAILED, reason=reason, message=message)

    @classmethod
    def skipped(cls, reason: str, message: Optional[str] = None) -> 'ProcessingOutcome':
        return cls(OutcomeStatus.SKIPPED, reason=reason, message=message)

    @property
    def is_failure(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    def describe(self) -> str:
        """Format a one-line summary for logs and progress output."""
        if self.status is OutcomeStatus.SUCCEEDED:
            noun = 'page' if self.page_count == 1 else 'pages'
            return f"{self.page_count} {noun} published"
        text = f"{self.status.value}: {self.reason}"
        if self.message:
            text += f" ({self.message})"
        return text
