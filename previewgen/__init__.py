"""
Preview Generation Package for content pool items

Batch operation:
    1. Pull the items flagged "needs processing" from the content store
    2. Stage, classify and render each item into page previews and thumbnails
    3. Publish the previews and clear the item's pending flag

Documents are rasterized page by page; images are only resized.
"""

__version__ = "1.0.0"

from .exceptions import (
    PreviewError,
    ConfigurationError,
    ContentStoreError,
    RasterizeError,
    ItemProcessingError,
)
from .preview_config import PreviewConfig, SizeBounds
from .content_store import ContentStoreClient
from .type_classifier import TypeClassifier, Classification
from .image_transform import ImageTransformer
from .rasterizer import Rasterizer, PopplerRasterizer
from .staging import StagingArea
from .work_item import (
    WorkItem,
    Batch,
    PendingEntry,
    ItemMetadata,
    PageImage,
    PreviewVariant,
    SizeClass,
)
from .processing_outcome import ProcessingOutcome, OutcomeStatus
from .batch_stats import BatchStats
from .batch_progress import BatchProgress
from .pipeline import PreviewPipeline

__all__ = [
    "PreviewError",
    "ConfigurationError",
    "ContentStoreError",
    "RasterizeError",
    "ItemProcessingError",
    "PreviewConfig",
    "SizeBounds",
    "ContentStoreClient",
    "TypeClassifier",
    "Classification",
    "ImageTransformer",
    "Rasterizer",
    "PopplerRasterizer",
    "StagingArea",
    "WorkItem",
    "Batch",
    "PendingEntry",
    "ItemMetadata",
    "PageImage",
    "PreviewVariant",
    "SizeClass",
    "ProcessingOutcome",
    "OutcomeStatus",
    "BatchStats",
    "BatchProgress",
    "PreviewPipeline",
]
