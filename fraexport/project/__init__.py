"""
Project Package

Library asset metadata, symbol variants and the project loader that
assembles the exporter's input.
"""

from .symbols import (
    Symbol, ImageSymbol, CollisionBoxSymbol, PolygonSymbol, LineSegmentSymbol,
    CollisionBodySymbol, PointSymbol, TilemapSymbol, parse_symbol,
)
from .data_types import (
    LayerType, KeyframeType, SYMBOL_KEYFRAME_TYPES, DEFAULT_SCRIPT_LANGUAGE,
    AssetMetadata, ScriptAssetMetadata, PaletteCollectionMetadata, PaletteColor, PaletteMap,
    PaletteMapColor, NineSliceMetadata,
    SpriteEntityMetadata, SpriteAnimation, Layer, Keyframe, AssetEntry, OutputFolder,
    engine_metadata, spritesheet_group,
)
from .loader import ExportSource, load_project
