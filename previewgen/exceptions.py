"""
Exceptions raised by the preview pipeline and its collaborators.
"""

from typing import Optional


class PreviewError(Exception):
    """Base class for all previewgen errors."""


class ConfigurationError(PreviewError):
    """Raised when the preview configuration is unusable."""


class ContentStoreError(PreviewError):
    """
    Raised when the content store answers with a non-success status.

    Attributes:
        status: HTTP status code, or None if no response was received
        url: URL of the failed request
    """

    def __init__(self, message: str, status: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.url = url


class RasterizeError(PreviewError):
    """Raised when a document cannot be converted into page images."""


class ItemProcessingError(PreviewError):
    """
    Raised inside the pipeline when a stage of an item fails.

    Attributes:
        reason: Short name of the failed stage (e.g., 'content-fetch')
        detail: Message of the underlying error
    """

    def __init__(self, reason: str, detail: Optional[str] = None):
        super().__init__(f"{reason}: {detail}" if detail else reason)
        self.reason = reason
        self.detail = detail
