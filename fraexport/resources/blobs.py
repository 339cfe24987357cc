"""
Image, audio and binary asset records.

These assets are written to the binary region unchanged; offsets are
filled in by the container serializer.
"""

from pathlib import PurePosixPath
from typing import Any, Dict, Optional

from fraexport.project import AssetMetadata, ExportSource
from fraexport.serialization import BlobRecord
from fraexport.utils import logWarning


def _base_record(metadata: AssetMetadata) -> Dict[str, Any]:
    return {
        'version': metadata.version,
        'id': metadata.id,
        'guid': metadata.guid,
        'tags': list(metadata.tags),
        'metadata': metadata.metadata,
    }


def _payload(metadata: AssetMetadata, source: ExportSource) -> bytes:
    entry = source.get_asset(metadata.guid)
    if entry is None or entry.data is None:
        logWarning(f"No data for asset {source.filename_of(metadata.guid)}, writing empty payload")
        return b''
    return entry.data


def audio_format(filename: Optional[str]) -> str:
    """File extension without the dot ('' when there is none)."""
    if not filename:
        return ''
    suffix = PurePosixPath(filename.replace('\\', '/')).suffix
    return suffix[1:] if suffix else ''


def image_blob(metadata: AssetMetadata, source: ExportSource) -> BlobRecord:
    return BlobRecord(record=_base_record(metadata), data=_payload(metadata, source))


def audio_blob(metadata: AssetMetadata, source: ExportSource) -> BlobRecord:
    record = _base_record(metadata)
    entry = source.get_asset(metadata.guid)
    record['format'] = audio_format(entry.filename if entry is not None else '')
    return BlobRecord(record=record, data=_payload(metadata, source))


def binary_blob(metadata: AssetMetadata, source: ExportSource) -> BlobRecord:
    return BlobRecord(record=_base_record(metadata), data=_payload(metadata, source))
