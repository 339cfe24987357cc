"""
Imaging Package

RGBA pixel buffers, sheet geometry and the Pillow-based PNG glue.
"""

from .geometry import Point, Rect
from .pixel_buffer import PixelBuffer
from .png_codec import decode_image, encode_png, recompress_png, encode_sheet
