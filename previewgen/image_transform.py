"""
ImageTransformer - Scales rasters into JPEG preview variants.
"""

import io
import logging
import os
from typing import Optional, Tuple, Union

from PIL import Image

Source = Union[bytes, str, os.PathLike]


class ImageTransformer:
    """
    Resizes images using Pillow and re-encodes them as JPEG.

    Two modes are supported:
        width-only:   resize(src, max_width) scales to exactly max_width,
                      height follows the aspect ratio
        bounding-box: resize(src, max_width, max_height) scales to fit
                      inside the box without exceeding either bound
    """

    CONTENT_TYPE = 'image/jpeg'

    def __init__(self, quality: int = 85, logger: Optional[logging.Logger] = None):
        """
        Initialize transformer.

        Args:
            quality: JPEG quality for output (default: 85)
            logger: Optional logger instance
        """
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    def resize(self, source: Source, max_width: int, max_height: Optional[int] = None) -> bytes:
        """
        Scale an image and return JPEG bytes.

        Args:
            source: Image bytes or path to an image file
            max_width: Width bound in pixels
            max_height: Height bound in pixels; omit for width-only scaling

        Returns:
            JPEG-encoded bytes of the scaled image
        """
        with self._open(source) as img:
            img.load()
            target = self.target_size(img.size, max_width, max_height)
            scaled = self._convert_color_mode(img).resize(target, Image.Resampling.LANCZOS)

        output = io.BytesIO()
        scaled.save(output, format='JPEG', quality=self.quality, optimize=True)
        return output.getvalue()

    @staticmethod
    def target_size(
        size: Tuple[int, int],
        max_width: int,
        max_height: Optional[int] = None
    ) -> Tuple[int, int]:
        """
        Compute output dimensions for a source of the given size.

        The width ratio decides the mode: without a height bound the height is
        derived from it. With a box, wide sources scale to the width bound and
        the rest to the height bound; the result is then fitted to the box.
        """
        width, height = size
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid source dimensions: {width}x{height}")

        width_ratio = width / max_width
        box = max_height is not None
        if not box:
            max_height = height / width_ratio

        if width / height > width_ratio:
            scale = max_width / width
        else:
            scale = max_height / height

        # fit inside max_width x (scale * height)
        factor = min(max_width / width, scale)
        if box:
            factor = min(factor, max_height / height)

        if not box:
            return max_width, max(1, round(height * factor))
        return max(1, round(width * factor)), max(1, round(height * factor))

    @staticmethod
    def _open(source: Source) -> Image.Image:
        if isinstance(source, (bytes, bytearray)):
            return Image.open(io.BytesIO(source))
        return Image.open(source)

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB, flattening transparency onto white."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img
