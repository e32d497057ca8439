"""
TypeClassifier - Resolves a declared mime type to a local file extension.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .preview_config import DEFAULT_IMAGE_EXTENSIONS


IGNORED_TYPE = 'ignored-type'
UNKNOWN_TYPE = 'unknown-type'

# Subset of Apache's mime.types covering what the pool usually holds.
DEFAULT_MIME_TYPES: Dict[str, List[str]] = {
    'application/pdf': ['pdf'],
    'application/msword': ['doc', 'dot'],
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document': ['docx'],
    'application/vnd.ms-excel': ['xls', 'xlm', 'xla', 'xlc', 'xlt', 'xlw'],
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet': ['xlsx'],
    'application/vnd.ms-powerpoint': ['ppt', 'pps', 'pot'],
    'application/vnd.openxmlformats-officedocument.presentationml.presentation': ['pptx'],
    'application/vnd.oasis.opendocument.text': ['odt'],
    'application/vnd.oasis.opendocument.spreadsheet': ['ods'],
    'application/vnd.oasis.opendocument.presentation': ['odp'],
    'application/rtf': ['rtf'],
    'text/plain': ['txt', 'text', 'conf', 'def', 'list', 'log', 'in'],
    'text/html': ['html', 'htm'],
    'image/jpeg': ['jpg', 'jpeg', 'jpe'],
    'image/pjpeg': ['jpg'],
    'image/png': ['png'],
    'image/gif': ['gif'],
    'image/vnd.adobe.photoshop': ['psd'],
}

DEFAULT_IGNORED_TYPES = frozenset({
    'application/zip',
    'application/x-tar',
    'application/octet-stream',
    'video/mp4',
    'video/quicktime',
    'audio/mpeg',
})


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying a mime type.

    Exactly one of extension (with leading '.') or reason is set.
    """
    extension: Optional[str] = None
    reason: Optional[str] = None

    @property
    def supported(self) -> bool:
        return self.extension is not None


class TypeClassifier:
    """
    Maps mime types to extensions using a mime.types style table.
    """

    def __init__(
        self,
        mime_types: Optional[Dict[str, List[str]]] = None,
        ignored_types: Optional[Iterable[str]] = None,
        image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize classifier.

        Args:
            mime_types: Mapping of mime type to registered extensions (no dots)
            ignored_types: Mime types that never get a preview
            image_extensions: Extensions handled as single images
            logger: Optional logger instance
        """
        self.mime_types = dict(DEFAULT_MIME_TYPES if mime_types is None else mime_types)
        self.ignored_types = frozenset(
            DEFAULT_IGNORED_TYPES if ignored_types is None else ignored_types
        )
        self.image_extensions = frozenset(ext.lower() for ext in image_extensions)
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_files(
        cls,
        mime_types_path: Optional[str] = None,
        ignore_types_path: Optional[str] = None,
        image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
        logger: Optional[logging.Logger] = None
    ) -> 'TypeClassifier':
        """Build a classifier from mime.types / ignore.types files, falling back to defaults."""
        mime_types = None
        ignored = None
        if mime_types_path:
            with open(mime_types_path, 'r', encoding='utf-8') as f:
                mime_types = parse_mime_types(f)
        if ignore_types_path:
            with open(ignore_types_path, 'r', encoding='utf-8') as f:
                ignored = parse_ignore_types(f)
        return cls(mime_types, ignored, image_extensions, logger)

    def classify(self, mime_type: Optional[str], hinted_extension: Optional[str] = None) -> Classification:
        """
        Resolve the extension used for the staged copy of an item.

        Args:
            mime_type: Declared mime type
            hinted_extension: Extension recorded by the store (e.g., '.jpeg')

        Returns:
            Classification with an extension, or the reason it is unsupported
        """
        if mime_type in self.ignored_types:
            return Classification(reason=IGNORED_TYPE)

        extensions = self.mime_types.get(mime_type) if mime_type else None
        if not extensions:
            return Classification(reason=UNKNOWN_TYPE)

        if hinted_extension:
            hint = hinted_extension[1:] if hinted_extension.startswith('.') else hinted_extension
            if hint in extensions:
                return Classification(extension=f".{hint}")

        return Classification(extension=f".{extensions[0]}")

    def is_image(self, extension: str) -> bool:
        """True if files with this extension only need resizing."""
        return extension.lower() in self.image_extensions


def parse_mime_types(lines: Iterable[str]) -> Dict[str, List[str]]:
    """
    Parse an Apache mime.types file.

    Each non-comment line is 'mime/type ext1 ext2 ...'. Types listed without
    extensions are kept out of the table. The first occurrence of a type wins.
    """
    table: Dict[str, List[str]] = {}
    for line in lines:
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        parts = line.split()
        if len(parts) < 2 or parts[0] in table:
            continue
        table[parts[0]] = parts[1:]
    return table


def parse_ignore_types(lines: Iterable[str]) -> frozenset:
    """Parse an ignore.types file: one mime type per line, '#' comments."""
    return frozenset(
        line.strip() for line in lines
        if line.strip() and not line.strip().startswith('#')
    )
