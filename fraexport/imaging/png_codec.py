"""
PNG encode/decode through Pillow.

Source images arrive as encoded file bytes and are decoded once into
PixelBuffers; finished spritesheets are encoded back to PNG for the
container's binary region.
"""

import io
import zlib

from PIL import Image

from .pixel_buffer import PixelBuffer

# Profile for the optional second pass: smallest output, slowest encode
RECOMPRESS_LEVEL = 9
RECOMPRESS_STRATEGY = zlib.Z_DEFAULT_STRATEGY


def decode_image(data: bytes) -> PixelBuffer:
    """
    Decode image file bytes (any format Pillow reads) into an RGBA buffer.

    Raises:
        PIL.UnidentifiedImageError, OSError: If the bytes are not a readable image
    """
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        return PixelBuffer.from_image(image)


def encode_png(buffer: PixelBuffer) -> bytes:
    """Encode a buffer as PNG with Pillow's default profile."""
    out = io.BytesIO()
    buffer.to_image().save(out, format='PNG')
    return out.getvalue()


def recompress_png(data: bytes) -> bytes:
    """
    Re-encode PNG bytes with the maximum deflate level.

    Trades CPU time for a smaller file; pixels are unchanged.
    """
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        out = io.BytesIO()
        image.save(out, format='PNG', optimize=True,
                   compress_level=RECOMPRESS_LEVEL, compress_type=RECOMPRESS_STRATEGY)
    return out.getvalue()


def encode_sheet(buffer: PixelBuffer, recompress: bool = False) -> bytes:
    """Encode a finished spritesheet, optionally running the recompress pass."""
    data = encode_png(buffer)
    if recompress:
        data = recompress_png(data)
    return data
