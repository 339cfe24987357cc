"""
Atlas Package

Trimming, deduplication and shelf packing of image assets into
power-of-two spritesheets, one sheet sequence per spritesheet group.
"""

from .data_types import SpriteFrame, SheetWriteState
from .packer import AtlasPacker, placeholder_asset
