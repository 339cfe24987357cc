"""
Nine slice records.

The nine slice's image is placed through the shared packer, on the
spritesheet group named in the nine slice's own metadata.
"""

from typing import Any, Dict

from fraexport.atlas import AtlasPacker, placeholder_asset
from fraexport.project import ExportSource, NineSliceMetadata, spritesheet_group
from fraexport.utils import logWarning


def nine_slice_record(nine_slice: NineSliceMetadata, source: ExportSource,
                      packer: AtlasPacker) -> Dict[str, Any]:
    """
    Place the nine slice's image and build its header record.

    A missing or undecodable image is replaced by the placeholder.
    """
    asset = source.get_asset(nine_slice.image_asset)
    if asset is None or asset.pixels is None:
        logWarning(f"Missing image asset: {nine_slice.image_asset} for nine slice {nine_slice.id}. "
                   f"Will use placeholder...")
        asset = placeholder_asset()

    frame = packer.place_image(asset, spritesheet_group(nine_slice.plugin_metadata))

    return {
        'version': nine_slice.version,
        'id': nine_slice.id,
        'guid': nine_slice.guid,
        'tags': list(nine_slice.tags),
        'sheetIndex': frame.sheet_index,
        'frameIndex': frame.frame_index,
        'borderLeft': nine_slice.border_left,
        'borderTop': nine_slice.border_top,
        'borderRight': nine_slice.border_right,
        'borderBottom': nine_slice.border_bottom,
    }
