"""
Shared binary region of the .fra container.

Every payload (spritesheet PNGs, image, audio and binary files) is appended
to one region; header records point into it with bytesOffset/bytesLength.
"""

import io
from typing import Any, Dict, Iterable, Tuple

from fraexport.errors import SerializationError


class BinaryRegion:
    """
    Append-only byte buffer that hands out (offset, length) pairs.

    Usage:
        region = BinaryRegion()
        offset, length = region.append(png_bytes)
        region.verify(records)
        data = region.getvalue()
    """

    def __init__(self):
        self._buffer = io.BytesIO()

    @property
    def length(self) -> int:
        return self._buffer.tell()

    def append(self, data: bytes) -> Tuple[int, int]:
        """
        Append a payload.

        Returns:
            (bytesOffset, bytesLength) of the payload within the region
        """
        offset = self._buffer.tell()
        written = self._buffer.write(data)
        return offset, written

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()

    def verify(self, records: Iterable[Dict[str, Any]]):
        """
        Check that records tile the region exactly, in write order.

        Raises:
            SerializationError: On a gap, an overlap, or a total length that
                                differs from the region size
        """
        expected = 0
        for index, record in enumerate(records):
            offset = record['bytesOffset']
            length = record['bytesLength']
            if offset != expected:
                raise SerializationError(
                    f"Record {index} starts at byte {offset}, expected {expected}")
            if length < 0:
                raise SerializationError(f"Record {index} has negative length {length}")
            expected = offset + length
        if expected != self.length:
            raise SerializationError(
                f"Records cover {expected:,} bytes but binary region holds {self.length:,}")
