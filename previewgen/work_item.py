"""
WorkItem - A content pool item pulled from the pending list, and its previews.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .staging import StagingArea


class SizeClass(str, Enum):
    """Preview size classes, in publishing order within a page."""
    LARGE = 'large'
    NORMAL = 'normal'
    SMALL = 'small'


@dataclass
class PendingEntry:
    """One entry of the store's "needs processing" listing."""
    id: str

    @classmethod
    def from_result(cls, result: dict) -> 'PendingEntry':
        """Create from a search result row ('_path' is '/p/abc123' or 'abc123')."""
        path = result['_path']
        return cls(id=path.rstrip('/').rsplit('/', 1)[-1])


@dataclass
class ItemMetadata:
    """Metadata the pipeline needs from an item's JSON representation."""
    mime_type: Optional[str]
    hinted_extension: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'ItemMetadata':
        return cls(
            mime_type=data.get('_mimeType'),
            hinted_extension=data.get('sakai:fileextension'),
        )


@dataclass
class PageImage:
    """
    One rasterized page of a work item.

    Attributes:
        index: 0-based page index used for local file naming
        path: Local path of the JPEG page image
    """
    index: int
    path: Path


@dataclass
class PreviewVariant:
    """A scaled rendition of one page, ready to publish."""
    page_number: int
    size_class: SizeClass
    data: bytes
    content_type: str = 'image/jpeg'


@dataclass
class WorkItem:
    """
    A content item being processed in the current batch.

    Attributes:
        id: Pool id assigned by the store
        mime_type: Declared mime type (from metadata)
        hinted_extension: Extension recorded at upload time, if any
        extension: Extension resolved by the type classifier
        page_count: Number of pages published
    """
    id: str
    mime_type: Optional[str] = None
    hinted_extension: Optional[str] = None
    extension: Optional[str] = None
    page_count: int = 0

    @property
    def filename(self) -> Optional[str]:
        """Local staging filename, available once the extension is resolved."""
        if self.extension is None:
            return None
        return f"{self.id}{self.extension}"


@dataclass
class Batch:
    """Work items pulled in one run together with their staging area."""
    staging: 'StagingArea'
    items: List[WorkItem] = field(default_factory=list)
