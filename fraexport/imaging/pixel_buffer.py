"""
RGBA8 pixel buffer.

Thin wrapper around a (height, width, 4) uint8 numpy array used for every
bitmap the exporter touches: decoded source images, trimmed sprite frames
and the growing spritesheets themselves.
"""

from typing import Optional, Tuple

import numpy as np

from .geometry import Rect

TRANSPARENT = (0, 0, 0, 0)


class PixelBuffer:
    """
    Mutable RGBA8 bitmap.

    Usage:
        sheet = PixelBuffer.blank(128, 128)
        sprite = PixelBuffer.from_image(Image.open("hero.png"))
        bounds = sprite.visible_bounds()
        sheet.blit(sprite.copy_region(bounds), 0, 0)
    """

    __hash__ = None

    def __init__(self, pixels: np.ndarray):
        """
        Args:
            pixels: Array of shape (height, width, 4), dtype uint8
        """
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected (height, width, 4) RGBA array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            pixels = pixels.astype(np.uint8)
        self.pixels = pixels

    @classmethod
    def blank(cls, width: int, height: int,
              color: Tuple[int, int, int, int] = TRANSPARENT) -> 'PixelBuffer':
        """Create a buffer filled with a single RGBA color."""
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = color
        return cls(pixels)

    @classmethod
    def from_image(cls, image) -> 'PixelBuffer':
        """Create a buffer from a Pillow image (converted to RGBA)."""
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        return cls(np.array(image, dtype=np.uint8))

    def to_image(self):
        """Return a Pillow RGBA image of this buffer."""
        from PIL import Image
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def rect(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def visible_bounds(self) -> Optional[Rect]:
        """
        Bounding rectangle of all pixels that are not fully transparent.

        Returns:
            Rect, or None if every pixel has alpha 0
        """
        if self.pixels.size == 0:
            return None
        alpha = self.pixels[:, :, 3] > 0
        rows = np.any(alpha, axis=1)
        cols = np.any(alpha, axis=0)
        if not rows.any():
            return None
        top, bottom = np.where(rows)[0][[0, -1]]
        left, right = np.where(cols)[0][[0, -1]]
        return Rect(int(left), int(top), int(right - left + 1), int(bottom - top + 1))

    def copy_region(self, region: Rect) -> 'PixelBuffer':
        """
        Copy a sub-rectangle into a new buffer.

        Parts of the region outside this buffer come back fully transparent.
        """
        result = PixelBuffer.blank(region.width, region.height)
        src_left = max(region.x, 0)
        src_top = max(region.y, 0)
        src_right = min(region.right, self.width)
        src_bottom = min(region.bottom, self.height)
        if src_right > src_left and src_bottom > src_top:
            dst_left = src_left - region.x
            dst_top = src_top - region.y
            result.pixels[dst_top:dst_top + (src_bottom - src_top),
                          dst_left:dst_left + (src_right - src_left)] = \
                self.pixels[src_top:src_bottom, src_left:src_right]
        return result

    def blit(self, source: 'PixelBuffer', x: int, y: int):
        """
        Copy source pixels into this buffer with their top left at (x, y).

        Raises:
            ValueError: If the source does not fit inside this buffer
        """
        target = Rect(x, y, source.width, source.height)
        if not self.rect.contains_rect(target):
            raise ValueError(f"Blit of {source.width}x{source.height} at ({x}, {y}) "
                             f"exceeds {self.width}x{self.height} buffer")
        self.pixels[y:y + source.height, x:x + source.width] = source.pixels

    def resized(self, width: int, height: int) -> 'PixelBuffer':
        """
        Return a larger transparent buffer with the current pixels copied
        into its top left corner.
        """
        if width < self.width or height < self.height:
            raise ValueError(f"Cannot shrink {self.width}x{self.height} buffer to {width}x{height}")
        result = PixelBuffer.blank(width, height)
        result.pixels[:self.height, :self.width] = self.pixels
        return result

    def equals(self, other: 'PixelBuffer') -> bool:
        """Pixel-exact comparison (dimensions and every channel)."""
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.equals(other)

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"
