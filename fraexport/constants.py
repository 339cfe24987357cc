"""
Constants used across the exporter modules.

Consolidates magic numbers and shared values of the .fra format.
"""

# Resource version written to the header (must match the engine's loader)
ASSET_VERSION = '0.0.17'

# Version written on every spritesheet record
SPRITESHEET_VERSION = 0

# Plugin namespace holding the engine metadata on every asset/construct
PLUGIN_METADATA_KEY = 'com.fraymakers.FraymakersMetadata'

# Reserved metadata key choosing the spritesheet group of an entity/nine slice
SPRITESHEET_GROUP_KEY = 'spritesheetGroup'
DEFAULT_SPRITESHEET_GROUP = 'default'

# Atlas sizes (pixels)
DEFAULT_SHEET_WIDTH = 128
DEFAULT_SHEET_HEIGHT = 128
MAX_SHEET_WIDTH = 4096
MAX_SHEET_HEIGHT = 4096
DEFAULT_SHEET_PADDING = 1

# Placeholder used when an image symbol references a missing asset
PLACEHOLDER_GUID = '__placeholder__'
PLACEHOLDER_FILENAME = 'placeholder.png'
PLACEHOLDER_SIZE = 100
PLACEHOLDER_COLOR = (0xFF, 0x14, 0x93, 0xFF)  # deep pink, opaque

# Seconds allowed for decoding a single image asset
DECODE_TIMEOUT = 5.0

# Script id holding the content manifest
MANIFEST_SCRIPT_ID = 'manifest'

# Output file extension
RESOURCE_EXTENSION = '.fra'
