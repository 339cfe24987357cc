"""
Resources Package

Header records for everything that is not a sprite entity: scripts,
palette collections, nine slices and raw image/audio/binary payloads.
"""

from .exportable import filter_exported
from .scripts import script_language, script_record, palette_data, palette_script_record
from .nine_slices import nine_slice_record
from .blobs import audio_format, image_blob, audio_blob, binary_blob
