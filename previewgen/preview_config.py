"""
PreviewConfig - Connection, staging and size settings for a preview run.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


DEFAULT_IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.psd')
DEFAULT_WORK_DIR = 'previewgen-work'


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'y', 't')


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


@dataclass
class SizeBounds:
    """
    Pixel bounds for each preview size class.

    Attributes:
        image_normal_width: Width bound of the 'normal' variant of image items
        page_normal_width: Width bound of the 'normal' variant of document pages
        raster_width: Width at which document pages are rasterized ('large')
        small_width: Bounding box width of 'small' variants
        small_height: Bounding box height of 'small' variants
    """
    image_normal_width: int = 900
    page_normal_width: int = 700
    raster_width: int = 1000
    small_width: int = 180
    small_height: int = 225

    @property
    def small_box(self) -> Tuple[int, int]:
        return self.small_width, self.small_height

    def validate(self) -> List[str]:
        errors = []
        for name in ('image_normal_width', 'page_normal_width', 'raster_width',
                     'small_width', 'small_height'):
            if getattr(self, name) <= 0:
                errors.append(f"{name} must be a positive number of pixels")
        return errors


@dataclass
class PreviewConfig:
    """
    Settings for one preview processing run.

    Attributes:
        server_url: Base URL of the content store (e.g., http://localhost:8080)
        username: Account used to read pending items and publish previews
        password: Password for that account
        verify_ssl: Verify TLS certificates
        timeout: Per-request timeout in seconds
        work_dir: Root of the local staging directories
        log_dir: Directory for the dated log files (None disables file logging)
        mime_types_path: Optional mime.types file (type -> extensions)
        ignore_types_path: Optional ignore.types file (mime types to skip)
        image_extensions: Extensions processed as images rather than documents
        sizes: Preview size bounds
        jpeg_quality: JPEG quality for generated previews
    """
    server_url: Optional[str] = None
    username: str = 'admin'
    password: str = 'admin'
    verify_ssl: bool = True
    timeout: float = 60.0
    work_dir: str = DEFAULT_WORK_DIR
    log_dir: Optional[str] = 'logs'
    mime_types_path: Optional[str] = None
    ignore_types_path: Optional[str] = None
    image_extensions: Tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    sizes: SizeBounds = field(default_factory=SizeBounds)
    jpeg_quality: int = 85

    @classmethod
    def from_env(cls) -> 'PreviewConfig':
        """Build configuration from PREVIEW_* environment variables."""
        sizes = SizeBounds(
            image_normal_width=_env_int('PREVIEW_IMAGE_NORMAL_WIDTH', 900),
            page_normal_width=_env_int('PREVIEW_PAGE_NORMAL_WIDTH', 700),
            raster_width=_env_int('PREVIEW_RASTER_WIDTH', 1000),
            small_width=_env_int('PREVIEW_SMALL_WIDTH', 180),
            small_height=_env_int('PREVIEW_SMALL_HEIGHT', 225),
        )
        return cls(
            server_url=os.getenv('PREVIEW_SERVER_URL'),
            username=os.getenv('PREVIEW_USERNAME', 'admin'),
            password=os.getenv('PREVIEW_PASSWORD', 'admin'),
            verify_ssl=_env_bool('PREVIEW_VERIFY_SSL', True),
            timeout=float(os.getenv('PREVIEW_TIMEOUT', '60')),
            work_dir=os.getenv('PREVIEW_WORK_DIR', DEFAULT_WORK_DIR),
            log_dir=os.getenv('PREVIEW_LOG_DIR', 'logs') or None,
            mime_types_path=os.getenv('PREVIEW_MIME_TYPES'),
            ignore_types_path=os.getenv('PREVIEW_IGNORE_TYPES'),
            sizes=sizes,
            jpeg_quality=_env_int('PREVIEW_JPEG_QUALITY', 85),
        )

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not self.server_url:
            errors.append("Server URL is required (PREVIEW_SERVER_URL or --server)")
        elif not self.server_url.startswith(('http://', 'https://')):
            errors.append(f"Server URL must start with http:// or https://: {self.server_url}")
        if not self.username:
            errors.append("Username is required")
        for label, path in (('mime types', self.mime_types_path),
                            ('ignore types', self.ignore_types_path)):
            if path and not os.path.isfile(path):
                errors.append(f"{label} file not found: {path}")
        if not 1 <= self.jpeg_quality <= 95:
            errors.append("JPEG quality must be between 1 and 95")
        errors.extend(self.sizes.validate())
        return errors
