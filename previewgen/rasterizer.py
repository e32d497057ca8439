"""
Rasterizer - Converts multi-page documents into ordered page images.
"""

import abc
import logging
import os
import re
from pathlib import Path
from typing import List, Optional

import sh

from .exceptions import RasterizeError
from .work_item import PageImage


class Rasterizer(abc.ABC):
    """
    Capability that turns a document into one JPEG per page.
    """

    @abc.abstractmethod
    def rasterize(self, document_path: Path, target_width: int, output_dir: Path) -> List[PageImage]:
        """
        Rasterize a document.

        Args:
            document_path: Staged copy of the document
            target_width: Approximate page width in pixels
            output_dir: Directory that receives the page images

        Returns:
            Pages in document order; empty if no page could be extracted

        Raises:
            RasterizeError: If the conversion tool fails
        """


class PopplerRasterizer(Rasterizer):
    """
    Rasterizes PDFs with poppler's pdftoppm.

    Other document types are converted to PDF with LibreOffice first.
    Page images end up in output_dir as 0.jpg, 1.jpg, ...
    """

    PAGE_PATTERN = re.compile(r'-(\d+)\.jpe?g$')

    def __init__(
        self,
        pdftoppm_bin: str = 'pdftoppm',
        soffice_bin: str = 'soffice',
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize rasterizer.

        Args:
            pdftoppm_bin: Name or path of the pdftoppm executable
            soffice_bin: Name or path of the LibreOffice executable
            logger: Optional logger instance
        """
        self.pdftoppm_bin = pdftoppm_bin
        self.soffice_bin = soffice_bin
        self.logger = logger or logging.getLogger(__name__)

    def rasterize(self, document_path: Path, target_width: int, output_dir: Path) -> List[PageImage]:
        document_path = Path(document_path)
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        if document_path.suffix.lower() == '.pdf':
            pdf_path = document_path
        else:
            pdf_path = self._convert_to_pdf(document_path, output_dir)
            if pdf_path is None:
                return []

        prefix = output_dir / 'page'
        self.logger.debug(f"Rasterizing {pdf_path} at {target_width}px")
        self._run(
            self.pdftoppm_bin,
            '-jpeg',
            '-scale-to-x', str(target_width),
            '-scale-to-y', '-1',
            str(pdf_path),
            str(prefix),
        )
        return self._collect_pages(output_dir)

    def _convert_to_pdf(self, document_path: Path, output_dir: Path) -> Optional[Path]:
        """Convert an office document to PDF; None if LibreOffice produced nothing."""
        self.logger.debug(f"Converting {document_path.name} to PDF")
        self._run(
            self.soffice_bin,
            '--headless',
            '--convert-to', 'pdf',
            '--outdir', str(output_dir),
            str(document_path),
        )
        pdf_path = output_dir / f"{document_path.stem}.pdf"
        if not pdf_path.is_file():
            self.logger.warning(f"No PDF produced for {document_path.name}")
            return None
        return pdf_path

    def _command(self, binary: str) -> sh.Command:
        return sh.Command(binary)

    def _run(self, binary: str, *args: str) -> None:
        try:
            command = self._command(binary)
            command(*args)
        except sh.CommandNotFound as e:
            raise RasterizeError(f"Converter not found: {binary}") from e
        except sh.ErrorReturnCode as e:
            stderr = e.stderr.decode('utf-8', 'replace').strip() if e.stderr else ''
            raise RasterizeError(
                f"{os.path.basename(binary)} exited with {e.exit_code}: {stderr}"
            ) from e

    def _collect_pages(self, output_dir: Path) -> List[PageImage]:
        """Order pdftoppm output by page ordinal and rename to 0-based names."""
        numbered = []
        for path in output_dir.iterdir():
            match = self.PAGE_PATTERN.search(path.name)
            if match and path.name.startswith('page-'):
                numbered.append((int(match.group(1)), path))
        numbered.sort()

        pages = []
        for index, (_, path) in enumerate(numbered):
            target = output_dir / f"{index}.jpg"
            try:
                path.rename(target)
            except OSError as e:
                raise RasterizeError(f"Unreadable page output {path.name}: {e}") from e
            pages.append(PageImage(index=index, path=target))
        return pages
