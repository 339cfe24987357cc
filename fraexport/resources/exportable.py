"""
Export filtering shared by every asset kind.
"""

from typing import List, Sequence, TypeVar

from fraexport.project import AssetMetadata, ExportSource
from fraexport.utils import logDebug, logWarning

T = TypeVar('T', bound=AssetMetadata)


def filter_exported(assets: Sequence[T], kind: str, source: ExportSource) -> List[T]:
    """
    Keep assets that are marked for export and have an id.

    Args:
        assets: Metadata records of one asset kind
        kind: Asset kind for log messages ("image", "script", ...)
        source: Export input, used for filenames in log messages

    Returns:
        Exported assets in input order
    """
    exported = []
    for metadata in assets:
        if metadata.is_exportable:
            exported.append(metadata)
        elif not metadata.export:
            logDebug(f"Skipping {kind} not marked for export: {source.filename_of(metadata.guid)}")
        else:
            logWarning(f"Skipping {kind} lacking an id: {source.filename_of(metadata.guid)}")
    return exported
