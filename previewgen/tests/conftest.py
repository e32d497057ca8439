"""
Pytest fixtures for previewgen tests.
"""

import io
from pathlib import Path

import pytest
from PIL import Image

from previewgen.rasterizer import Rasterizer
from previewgen.work_item import PageImage


def make_image_bytes(size=(100, 100), mode='RGB', color='red', fmt='JPEG') -> bytes:
    """Create encoded image bytes of the given size."""
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def preview_config(tmp_path):
    """Fixture providing a preview configuration."""
    from previewgen.preview_config import PreviewConfig

    return PreviewConfig(
        server_url='http://oae.example.com:8080',
        username='admin',
        password='secret',
        work_dir=str(tmp_path / 'work'),
        log_dir=None,
    )


@pytest.fixture
def image_factory():
    """Fixture providing the make_image_bytes helper."""
    return make_image_bytes


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    return make_image_bytes((100, 100))


@pytest.fixture
def sample_png_bytes():
    """Fixture providing a 1200x800 PNG with transparency."""
    return make_image_bytes((1200, 800), mode='RGBA', color=(255, 0, 0, 128), fmt='PNG')


class FakeRasterizer(Rasterizer):
    """Rasterizer stand-in that writes fixed-size page images."""

    def __init__(self, page_count=3, size=(1000, 1294)):
        self.page_count = page_count
        self.size = size
        self.calls = []

    def rasterize(self, document_path, target_width, output_dir):
        self.calls.append({
            'document_path': Path(document_path),
            'document_existed': Path(document_path).exists(),
            'target_width': target_width,
            'output_dir': Path(output_dir),
        })
        pages = []
        for index in range(self.page_count):
            path = Path(output_dir) / f"{index}.jpg"
            Image.new('RGB', self.size, color=(40 * index % 256, 80, 120)).save(path, format='JPEG')
            pages.append(PageImage(index=index, path=path))
        return pages


@pytest.fixture
def fake_rasterizer():
    """Fixture providing a rasterizer that produces three pages."""
    return FakeRasterizer(page_count=3)


@pytest.fixture
def rasterizer_factory():
    """Fixture providing FakeRasterizer for custom page counts."""
    return FakeRasterizer


@pytest.fixture
def mock_store():
    """Fixture providing a mocked content store client."""
    from unittest.mock import MagicMock
    from previewgen.content_store import ContentStoreClient

    mock = MagicMock(spec=ContentStoreClient)
    mock.list_pending.return_value = []
    mock.publish_variant.return_value = None
    mock.publish_status.return_value = None
    return mock


@pytest.fixture
def staging(tmp_path):
    """Fixture providing a staging area under a temporary directory."""
    from previewgen.staging import StagingArea

    return StagingArea(str(tmp_path / 'work'))


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
