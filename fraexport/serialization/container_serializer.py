"""
Container Serializer

Serializes a ResourceContainer to the .fra binary format.

File layout:
    u32 (big-endian)  header length
    [header bytes]    JSON header (raw, base64 or prettified)
    [binary region]   spritesheets | images | audio | binary

Header records of the binary sections carry bytesOffset/bytesLength into
the binary region; offsets are assigned here in section order.
"""

import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from fraexport.atlas import SheetWriteState
from fraexport.constants import ASSET_VERSION, SPRITESHEET_VERSION
from fraexport.imaging import encode_sheet
from fraexport.utils import log, logDebug, write_length_prefixed, read_length_prefixed
from .binary_region import BinaryRegion
from .header_serializer import JSON_FORMAT_BASE64, JSON_FORMATS, encode_header, decode_header


@dataclass
class BlobRecord:
    """
    Header record of a raw file payload (image, audio or binary asset).

    `record` holds every header field except bytesOffset/bytesLength.
    """
    record: Dict[str, Any]
    data: bytes


@dataclass
class ResourceContainer:
    """Everything that ends up in one .fra file, in output order."""
    version: str = ASSET_VERSION
    spritesheets: List[SheetWriteState] = field(default_factory=list)
    images: List[BlobRecord] = field(default_factory=list)
    audio: List[BlobRecord] = field(default_factory=list)
    binary: List[BlobRecord] = field(default_factory=list)
    scripts: List[Dict[str, Any]] = field(default_factory=list)
    entities: List[Dict[str, Any]] = field(default_factory=list)
    nine_slices: List[Dict[str, Any]] = field(default_factory=list)


class ContainerSerializer:
    """
    Serialize a resource container to bytes.

    Usage:
        serializer = ContainerSerializer(json_format='raw', recompress=False)
        data = serializer.serialize(container)
    """

    def __init__(self, json_format: str = JSON_FORMAT_BASE64, recompress: bool = False):
        """
        Args:
            json_format: Header format (raw, base64 or prettify)
            recompress: Re-encode spritesheet PNGs with the high compression profile
        """
        if json_format not in JSON_FORMATS:
            raise ValueError(f"Unknown JSON format '{json_format}'")
        self.json_format = json_format
        self.recompress = recompress

    def serialize(self, container: ResourceContainer) -> bytes:
        """
        Serialize the complete container.

        Returns:
            .fra file bytes

        Raises:
            SerializationError: If the offset table does not match the binary region
        """
        region = BinaryRegion()

        spritesheets = self._write_spritesheets(region, container.spritesheets)
        images = self._write_blobs(region, container.images)
        audio = self._write_blobs(region, container.audio)
        binary = self._write_blobs(region, container.binary)

        region.verify(spritesheets + images + audio + binary)

        header = {
            'version': container.version,
            'spritesheets': spritesheets,
            'images': images,
            'audio': audio,
            'binary': binary,
            'scripts': container.scripts,
            'entities': container.entities,
            'nineSlices': container.nine_slices,
        }
        header_bytes = encode_header(header, self.json_format)

        buffer = io.BytesIO()
        write_length_prefixed(buffer, header_bytes)
        buffer.write(region.getvalue())

        log(f"  Header ({self.json_format}): {len(header_bytes):,} bytes")
        log(f"  Binary region: {region.length:,} bytes "
            f"({len(spritesheets)} sheets, {len(images)} images, {len(audio)} audio, {len(binary)} binary)")

        return buffer.getvalue()

    def _write_spritesheets(self, region: BinaryRegion,
                            sheets: List[SheetWriteState]) -> List[Dict[str, Any]]:
        records = []
        for sheet in sheets:
            png = encode_sheet(sheet.buffer, recompress=self.recompress)
            offset, length = region.append(png)
            records.append({
                'version': SPRITESHEET_VERSION,
                'bytesOffset': offset,
                'bytesLength': length,
                'frames': sheet.frame_table(),
                'group': sheet.group_id,
            })
            logDebug(f"Spritesheet {sheet.group_id}[{sheet.group_sheet_index}]: "
                     f"{sheet.width}x{sheet.height}, {len(sheet.rects)} frames, {length:,} bytes")
        return records

    @staticmethod
    def _write_blobs(region: BinaryRegion, blobs: List[BlobRecord]) -> List[Dict[str, Any]]:
        records = []
        for blob in blobs:
            offset, length = region.append(blob.data)
            record = dict(blob.record)
            record['bytesOffset'] = offset
            record['bytesLength'] = length
            records.append(record)
        return records


def read_container(data: bytes) -> Tuple[Dict[str, Any], bytes]:
    """
    Split .fra bytes into the parsed header and the binary region.

    Raises:
        ValueError: If the length prefix or header is malformed
    """
    header_bytes, offset = read_length_prefixed(data, 0)
    return decode_header(header_bytes), data[offset:]
