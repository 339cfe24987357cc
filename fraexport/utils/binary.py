"""
Binary File Utilities

Helpers for the length-prefixed sections of the .fra container.

Container prefix format:
- u32 (big-endian) section length
- [length bytes of data]
"""

import struct
import io
from typing import BinaryIO, Tuple, Union

LENGTH_PREFIX = struct.Struct('>I')
LENGTH_PREFIX_SIZE = LENGTH_PREFIX.size
MAX_SECTION_LENGTH = 0xFFFFFFFF


def write_length_prefixed(buffer: Union[BinaryIO, io.BytesIO], data: bytes):
    """
    Write a big-endian u32 length followed by the data itself.

    Args:
        buffer: Output buffer (file or BytesIO)
        data: Section bytes

    Raises:
        ValueError: If the section does not fit a u32 length
    """
    if len(data) > MAX_SECTION_LENGTH:
        raise ValueError(f"Section of {len(data):,} bytes exceeds u32 length prefix")
    buffer.write(LENGTH_PREFIX.pack(len(data)))
    buffer.write(data)


def read_length_prefixed(data: bytes, offset: int = 0) -> Tuple[bytes, int]:
    """
    Read a length-prefixed section.

    Args:
        data: Binary data
        offset: Offset of the length prefix

    Returns:
        Tuple of (section bytes, offset after the section)
    """
    if offset + LENGTH_PREFIX_SIZE > len(data):
        raise ValueError(f"Not enough data for length prefix at offset {offset}")
    (length,) = LENGTH_PREFIX.unpack_from(data, offset)
    start = offset + LENGTH_PREFIX_SIZE
    end = start + length
    if end > len(data):
        raise ValueError(f"Section at offset {offset} declares {length:,} bytes, "
                         f"only {len(data) - start:,} available")
    return data[start:end], end
