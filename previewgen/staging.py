"""
StagingArea - Ephemeral local directories for one batch and its items.
"""

import logging
import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional


class StagingArea:
    """
    Owns the per-batch 'docs' and 'previews' directories.

    Staged originals live in docs/<id><ext>; rasterized pages and scaled
    intermediates live in previews/<id>/. Everything is removed when the
    batch closes, and per-item paths are removed as soon as the item is done.
    """

    DOCS_DIRNAME = 'docs'
    PREVIEWS_DIRNAME = 'previews'

    def __init__(self, root: str, logger: Optional[logging.Logger] = None):
        """
        Initialize staging area.

        Args:
            root: Directory under which the batch directories are created
            logger: Optional logger instance
        """
        self.root = Path(root)
        self.docs_dir = self.root / self.DOCS_DIRNAME
        self.previews_dir = self.root / self.PREVIEWS_DIRNAME
        self.logger = logger or logging.getLogger(__name__)

    def open(self) -> None:
        """Create the batch directories, clearing leftovers of an interrupted run."""
        for directory in (self.docs_dir, self.previews_dir):
            if directory.exists():
                self.logger.warning(f"Removing stale staging directory: {directory}")
                shutil.rmtree(directory)
            directory.mkdir(parents=True)

    def close(self) -> None:
        """Remove the batch directories and everything in them."""
        for directory in (self.previews_dir, self.docs_dir):
            self._remove_tree(directory)

    def __enter__(self) -> 'StagingArea':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def item_path(self, filename: str) -> Path:
        """Path of a staged original inside the docs directory."""
        return self.docs_dir / filename

    def write_item(self, filename: str, data: bytes) -> Path:
        """Write a fetched original into the docs directory."""
        path = self.item_path(filename)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def remove_item(self, filename: Optional[str]) -> None:
        """Delete a staged original; missing files are ignored."""
        if not filename:
            return
        path = self.item_path(filename)
        if path.exists():
            try:
                os.remove(path)
            except OSError as e:
                self.logger.warning(f"Could not delete {path}: {e}")

    @contextmanager
    def item_file(self, filename: Optional[str]) -> Iterator[Path]:
        """
        Scope the lifetime of a staged original.

        The file at docs/<filename> is removed on exit, whether or not it
        was ever written.
        """
        try:
            yield self.item_path(filename) if filename else None
        finally:
            self.remove_item(filename)

    @contextmanager
    def page_dir(self, item_id: str) -> Iterator[Path]:
        """Yield previews/<item_id>/ and remove it with its contents on exit."""
        path = self.previews_dir / item_id
        path.mkdir(parents=True, exist_ok=True)
        try:
            yield path
        finally:
            self._remove_tree(path)

    def _remove_tree(self, path: Path) -> None:
        if path.exists():
            try:
                shutil.rmtree(path)
            except OSError as e:
                self.logger.warning(f"Could not delete {path}: {e}")
