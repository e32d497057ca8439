"""Tests for ImageTransformer class."""

import io
import pytest
from PIL import Image

from previewgen.image_transform import ImageTransformer


class TestTargetSize:
    """Tests for the resize dimension calculation."""

    @pytest.mark.parametrize('size, bound', [
        ((2000, 1500), 900),
        ((1234, 987), 700),
        ((1000, 1294), 700),
        ((640, 4000), 900),
        ((3000, 200), 700),
    ])
    def test_width_only_matches_width(self, size, bound):
        """Width-only mode hits the width bound exactly."""
        width, height = ImageTransformer.target_size(size, bound)

        expected_height = size[1] / (size[0] / bound)
        assert width == bound
        assert abs(height - expected_height) <= 1

    @pytest.mark.parametrize('size', [
        (1000, 1294),
        (2000, 500),
        (1000, 150),
        (100, 150),
        (3000, 3000),
        (50, 2000),
        (180, 225),
    ])
    def test_box_never_exceeds_bounds(self, size):
        """Bounding-box mode stays within both bounds."""
        width, height = ImageTransformer.target_size(size, 180, 225)

        assert width <= 180
        assert height <= 225

    @pytest.mark.parametrize('size, bounds', [
        ((1000, 1294), (180, 225)),
        ((2000, 1500), (180, 225)),
        ((1200, 800), (900, None)),
        ((800, 1200), (700, None)),
    ])
    def test_preserves_aspect_ratio(self, size, bounds):
        """Output aspect ratio stays close to the source's."""
        width, height = ImageTransformer.target_size(size, *bounds)

        source_ratio = size[0] / size[1]
        assert abs(width / height - source_ratio) / source_ratio < 0.02

    def test_portrait_page_fills_box_height(self):
        """A portrait page is limited by the box height."""
        assert ImageTransformer.target_size((1000, 1294), 180, 225) == (174, 225)

    def test_landscape_fills_box_width(self):
        """A wide image is limited by the box width."""
        assert ImageTransformer.target_size((2000, 500), 180, 225) == (180, 45)

    def test_invalid_dimensions(self):
        """Test that empty sources are rejected."""
        with pytest.raises(ValueError):
            ImageTransformer.target_size((0, 100), 180, 225)


class TestImageTransformer:
    """Tests for ImageTransformer class."""

    def test_init_defaults(self):
        """Test default initialization."""
        transformer = ImageTransformer()

        assert transformer.quality == 85

    def test_resize_width_only(self, image_factory):
        """Test width-only resize produces a JPEG of the expected size."""
        transformer = ImageTransformer()

        data = transformer.resize(image_factory((1800, 1200)), 900)

        img = Image.open(io.BytesIO(data))
        assert img.format == 'JPEG'
        assert img.size == (900, 600)

    def test_resize_bounding_box(self, image_factory):
        """Test bounding-box resize."""
        transformer = ImageTransformer()

        data = transformer.resize(image_factory((1000, 1294)), 180, 225)

        img = Image.open(io.BytesIO(data))
        assert img.size == (174, 225)

    def test_resize_from_path(self, tmp_path, image_factory):
        """Test resizing a file on disk."""
        path = tmp_path / 'page.jpg'
        path.write_bytes(image_factory((1000, 500)))
        transformer = ImageTransformer()

        data = transformer.resize(path, 700)

        assert Image.open(io.BytesIO(data)).size == (700, 350)

    def test_resize_flattens_transparency(self, sample_png_bytes):
        """Test that RGBA sources are encoded as RGB JPEG."""
        transformer = ImageTransformer()

        data = transformer.resize(sample_png_bytes, 900)

        img = Image.open(io.BytesIO(data))
        assert img.mode == 'RGB'
        assert img.size == (900, 600)

    def test_resize_palette_image(self, image_factory):
        """Test that palette images are converted."""
        transformer = ImageTransformer()

        data = transformer.resize(image_factory((400, 200), mode='P', color=1, fmt='GIF'), 180, 225)

        img = Image.open(io.BytesIO(data))
        assert img.mode == 'RGB'
        assert img.size == (180, 90)

    def test_resize_is_deterministic(self, image_factory):
        """Same input and bounds give the same bytes."""
        transformer = ImageTransformer()
        source = image_factory((640, 480), color='blue')

        assert transformer.resize(source, 180, 225) == transformer.resize(source, 180, 225)

    def test_resize_invalid_image(self):
        """Test handling of invalid image data."""
        transformer = ImageTransformer()

        with pytest.raises(Exception):
            transformer.resize(b'not an image', 900)
