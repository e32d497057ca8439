"""
PreviewPipeline - Generates and publishes previews for pending content items.
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional

from .batch_progress import BatchProgress
from .batch_stats import BatchStats
from .content_store import ContentStoreClient, FieldValue
from .exceptions import ItemProcessingError
from .image_transform import ImageTransformer
from .preview_config import SizeBounds
from .processing_outcome import ProcessingOutcome
from .rasterizer import Rasterizer
from .staging import StagingArea
from .type_classifier import TypeClassifier
from .work_item import Batch, PreviewVariant, SizeClass, WorkItem

METADATA_FETCH = 'metadata-fetch'
CONTENT_FETCH = 'content-fetch'
STAGING_ERROR = 'staging-error'
RASTERIZE_ERROR = 'rasterize-error'
TRANSFORM_ERROR = 'transform-error'
PUBLISH_ERROR = 'publish-error'
UNEXPECTED_ERROR = 'unexpected-error'
NO_PAGES = 'no-pages'


class PreviewPipeline:
    """
    Drives each pending item through fetch, classify, transform and publish.

    Items are processed one at a time. Whatever happens to an item, its
    'needs processing' flag is cleared and its staged files are removed
    before the next item starts.
    """

    def __init__(
        self,
        store: ContentStoreClient,
        classifier: TypeClassifier,
        transformer: ImageTransformer,
        rasterizer: Rasterizer,
        staging: StagingArea,
        sizes: Optional[SizeBounds] = None,
        cadence: float = 0.0,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            store: Content store client
            classifier: Mime type classifier
            transformer: Image transformer for normal/small variants
            rasterizer: Document rasterizer
            staging: Staging area for the batch
            sizes: Preview size bounds
            cadence: Seconds to wait between items
            logger: Optional logger instance
        """
        self.store = store
        self.classifier = classifier
        self.transformer = transformer
        self.rasterizer = rasterizer
        self.staging = staging
        self.sizes = sizes or SizeBounds()
        self.cadence = cadence
        self.logger = logger or logging.getLogger(__name__)
        self.stats = BatchStats()
        self._stop_requested = False

    def stop(self) -> None:
        """Request the pipeline to stop after the current item."""
        self._stop_requested = True

    def run(
        self,
        progress: Optional[BatchProgress] = None,
        limit: Optional[int] = None
    ) -> BatchStats:
        """
        Process one batch of pending items.

        Args:
            progress: Optional progress tracker
            limit: Optional limit on the number of items to process

        Returns:
            BatchStats with results

        Raises:
            ContentStoreError: If the pending list cannot be fetched
        """
        pending = self.store.list_pending()
        self.logger.info(f"processing {len(pending)} entries")

        if limit is not None and len(pending) > limit:
            self.logger.info(f"Limiting batch to {limit} entries")
            pending = pending[:limit]

        self.stats = BatchStats(total_to_process=len(pending))
        if not pending or self._stop_requested:
            return self.stats

        batch = Batch(staging=self.staging, items=[WorkItem(id=entry.id) for entry in pending])
        self.logger.info(
            f"Starts a new batch of queued files: {', '.join(item.id for item in batch.items)}"
        )

        with batch.staging:
            for item in batch.items:
                if self._stop_requested:
                    self.logger.info("Stop requested, halting batch")
                    break

                outcome = self.process_item(item)
                self.stats.record(item.id, outcome)

                if progress:
                    progress.on_item_finished(item, outcome)
                    progress.on_progress_update(self.stats)

                if self.cadence > 0:
                    time.sleep(self.cadence)

        self.logger.info(
            f"Batch complete: {self.stats.succeeded} published, "
            f"{self.stats.skipped} skipped, {self.stats.failed} failed "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )
        return self.stats

    def process_item(self, item: WorkItem) -> ProcessingOutcome:
        """
        Process a single item and report its status to the store.

        Never raises: errors become a failed outcome.
        """
        self.logger.info(f"processing {item.id}")
        try:
            outcome = self._generate(item)
        except ItemProcessingError as e:
            outcome = ProcessingOutcome.failed(e.reason, e.detail)
        except Exception as e:
            outcome = ProcessingOutcome.failed(UNEXPECTED_ERROR, str(e))

        if outcome.is_failure:
            self.logger.warning(
                f"error generating preview/thumbnail (ID: {item.id}): {outcome.describe()}"
            )
            self._publish_flags(item.id, {'sakai:processing_failed': True})
        else:
            self.logger.info(f"finished {item.id}: {outcome.describe()}")

        self._publish_flags(item.id, {'sakai:needsprocessing': False})
        return outcome

    def _generate(self, item: WorkItem) -> ProcessingOutcome:
        with self._stage(METADATA_FETCH):
            metadata = self.store.get_metadata(item.id)
        item.mime_type = metadata.mime_type
        item.hinted_extension = metadata.hinted_extension

        classification = self.classifier.classify(item.mime_type, item.hinted_extension)
        if not classification.supported:
            self.logger.info(
                f"ignoring processing of {item.id}, no preview can be generated for "
                f"{item.mime_type} files (extension {item.hinted_extension}): {classification.reason}"
            )
            return ProcessingOutcome.skipped(classification.reason)

        item.extension = classification.extension
        self.logger.info(f"with filename: {item.filename}")

        with self.staging.item_file(item.filename) as staged:
            with self._stage(CONTENT_FETCH):
                data = self.store.get_content(item.id)
            with self._stage(STAGING_ERROR):
                self.staging.write_item(item.filename, data)
            self.logger.debug(f"Staged {item.filename} ({len(data)} bytes)")

            if self.classifier.is_image(item.extension):
                item.page_count = self._process_image(item, staged)
            else:
                item.page_count = self._process_document(item, staged)

        if item.page_count == 0:
            self.logger.info(f"skipping {item.id}, no pages could be extracted")
            return ProcessingOutcome.skipped(NO_PAGES)

        with self._stage(PUBLISH_ERROR):
            self.store.publish_status(
                item.id, {'sakai:pagecount': item.page_count, 'sakai:hasPreview': True}
            )
        return ProcessingOutcome.succeeded(item.page_count)

    def _process_image(self, item: WorkItem, staged: Path) -> int:
        """Publish normal and small variants of a single image; returns the page count."""
        with self._stage(TRANSFORM_ERROR):
            normal = self.transformer.resize(staged, self.sizes.image_normal_width)
            small = self.transformer.resize(staged, *self.sizes.small_box)

        self._publish_variants(item, [
            PreviewVariant(1, SizeClass.NORMAL, normal),
            PreviewVariant(1, SizeClass.SMALL, small),
        ])
        return 1

    def _process_document(self, item: WorkItem, staged: Path) -> int:
        """Rasterize a document and publish large/normal/small variants per page."""
        with self.staging.page_dir(item.id) as page_dir:
            with self._stage(RASTERIZE_ERROR):
                pages = self.rasterizer.rasterize(staged, self.sizes.raster_width, page_dir)
            self.logger.debug(f"Rasterized {item.filename}: {len(pages)} pages")

            for number, page in enumerate(pages, start=1):
                with self._stage(TRANSFORM_ERROR):
                    large = Path(page.path).read_bytes()
                    normal = self.transformer.resize(page.path, self.sizes.page_normal_width)
                    small = self.transformer.resize(page.path, *self.sizes.small_box)

                self._publish_variants(item, [
                    PreviewVariant(number, SizeClass.LARGE, large),
                    PreviewVariant(number, SizeClass.NORMAL, normal),
                    PreviewVariant(number, SizeClass.SMALL, small),
                ])
            return len(pages)

    def _publish_variants(self, item: WorkItem, variants: Iterable[PreviewVariant]) -> None:
        with self._stage(PUBLISH_ERROR):
            for variant in variants:
                self.store.publish_variant(
                    item.id,
                    variant.data,
                    variant.size_class,
                    variant.page_number,
                    variant.content_type,
                )
                self.stats.variants_published += 1
                self.logger.debug(
                    f"Uploaded {item.id} page {variant.page_number} "
                    f"{variant.size_class.value} ({len(variant.data)} bytes)"
                )

    def _publish_flags(self, item_id: str, fields: Dict[str, FieldValue]) -> None:
        """Write status flags; a failure here is logged and the batch goes on."""
        try:
            self.store.publish_status(item_id, fields)
        except Exception as e:
            self.logger.error(f"Could not update status of {item_id} {fields}: {e}")

    @contextmanager
    def _stage(self, reason: str) -> Iterator[None]:
        """Attribute any error raised inside the block to a pipeline stage."""
        try:
            yield
        except ItemProcessingError:
            raise
        except Exception as e:
            raise ItemProcessingError(reason, str(e)) from e
