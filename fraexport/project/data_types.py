"""
Data types for library asset metadata.

Mirrors the editor's metadata records (camelCase on disk, snake_case here).
Entities keep their layers, keyframes and symbols in id lookup tables; the
flattener resolves references through these tables, never through object
pointers.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fraexport.constants import (
    PLUGIN_METADATA_KEY, SPRITESHEET_GROUP_KEY, DEFAULT_SPRITESHEET_GROUP,
)
from .symbols import Symbol, parse_symbol


class LayerType:
    """Layer type tags as written by the editor."""
    IMAGE = 'IMAGE'
    COLLISION_BOX = 'COLLISION_BOX'
    POLYGON = 'POLYGON'
    LINE_SEGMENT = 'LINE_SEGMENT'
    COLLISION_BODY = 'COLLISION_BODY'
    POINT = 'POINT'
    TILEMAP = 'TILEMAP'
    FRAME_SCRIPT = 'FRAME_SCRIPT'
    LABEL = 'LABEL'


class KeyframeType(LayerType):
    """Keyframe type tags (same set as layers)."""


# Keyframe types that reference a symbol
SYMBOL_KEYFRAME_TYPES = frozenset({
    KeyframeType.IMAGE,
    KeyframeType.COLLISION_BOX,
    KeyframeType.POLYGON,
    KeyframeType.LINE_SEGMENT,
    KeyframeType.COLLISION_BODY,
    KeyframeType.POINT,
    KeyframeType.TILEMAP,
})

DEFAULT_SCRIPT_LANGUAGE = 'hscript'


def engine_metadata(plugin_metadata: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Copy of the engine's plugin metadata bag ({} when absent).

    The bag is opaque: it is copied verbatim and never validated.
    """
    if not plugin_metadata:
        return {}
    bag = plugin_metadata.get(PLUGIN_METADATA_KEY)
    if not bag:
        return {}
    return copy.deepcopy(bag)


def spritesheet_group(plugin_metadata: Optional[Dict[str, Any]]) -> str:
    """Spritesheet group selected by the reserved metadata key."""
    bag = (plugin_metadata or {}).get(PLUGIN_METADATA_KEY) or {}
    return bag.get(SPRITESHEET_GROUP_KEY) or DEFAULT_SPRITESHEET_GROUP


@dataclass
class AssetMetadata:
    """Fields shared by every library asset."""
    guid: str
    id: str = ''
    export: bool = True
    version: int = 0
    tags: List[str] = field(default_factory=list)
    plugin_metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def metadata(self) -> Dict[str, Any]:
        return engine_metadata(self.plugin_metadata)

    @property
    def is_exportable(self) -> bool:
        """Only assets marked for export and given an id reach the output."""
        return bool(self.export) and bool(self.id)

    @classmethod
    def _common_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        guid = data.get('guid')
        if not guid:
            raise ValueError("Asset metadata has no guid")
        return {
            'guid': guid,
            'id': data.get('id') or '',
            'export': bool(data.get('export', True)),
            'version': data.get('version', 0),
            'tags': list(data.get('tags') or []),
            'plugin_metadata': dict(data.get('pluginMetadata') or {}),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AssetMetadata':
        return cls(**cls._common_fields(data))


@dataclass
class ScriptAssetMetadata(AssetMetadata):
    script: str = ''
    language: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScriptAssetMetadata':
        return cls(script=data.get('script') or '',
                   language=data.get('language') or None,
                   **cls._common_fields(data))


@dataclass
class PaletteColor:
    id: str
    color: str


@dataclass
class PaletteMapColor:
    palette_color_id: str
    target_color: str


@dataclass
class PaletteMap:
    name: str
    colors: List[PaletteMapColor] = field(default_factory=list)
    plugin_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PaletteCollectionMetadata(AssetMetadata):
    colors: List[PaletteColor] = field(default_factory=list)
    maps: List[PaletteMap] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PaletteCollectionMetadata':
        colors = [PaletteColor(id=c.get('$id', ''), color=c.get('color', ''))
                  for c in data.get('colors') or []]
        maps = []
        for m in data.get('maps') or []:
            maps.append(PaletteMap(
                name=m.get('name', ''),
                colors=[PaletteMapColor(palette_color_id=c.get('paletteColorId', ''),
                                        target_color=c.get('targetColor', ''))
                        for c in m.get('colors') or []],
                plugin_metadata=dict(m.get('pluginMetadata') or {}),
            ))
        return cls(colors=colors, maps=maps, **cls._common_fields(data))


@dataclass
class NineSliceMetadata(AssetMetadata):
    image_asset: str = ''
    border_left: float = 0
    border_top: float = 0
    border_right: Optional[float] = None
    border_bottom: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NineSliceMetadata':
        return cls(image_asset=data.get('imageAsset') or '',
                   border_left=data.get('borderLeft', 0),
                   border_top=data.get('borderTop', 0),
                   border_right=data.get('borderRight'),
                   border_bottom=data.get('borderBottom'),
                   **cls._common_fields(data))


@dataclass
class SpriteAnimation:
    """Named animation referencing layers by id (bottom to top)."""
    name: str
    layer_ids: List[str] = field(default_factory=list)
    plugin_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Layer:
    id: str
    name: str
    type: str
    keyframe_ids: List[str] = field(default_factory=list)
    plugin_metadata: Dict[str, Any] = field(default_factory=dict)
    # Tilemap
    tile_width: Optional[int] = None
    tile_height: Optional[int] = None
    # Frame script
    language: Optional[str] = None


@dataclass
class Keyframe:
    id: str
    type: str
    length: int = 1
    symbol_id: Optional[str] = None
    tweened: bool = False
    tween_type: Optional[str] = None
    plugin_metadata: Dict[str, Any] = field(default_factory=dict)
    # Frame script
    code: Optional[str] = None
    # Label
    name: Optional[str] = None

    @property
    def has_symbol_type(self) -> bool:
        return self.type in SYMBOL_KEYFRAME_TYPES


@dataclass
class SpriteEntityMetadata(AssetMetadata):
    """
    Sprite entity with its id lookup tables.

    Attributes:
        animations: Ordered animations
        layers: layer id -> Layer
        keyframes: keyframe id -> Keyframe
        symbols: symbol id -> Symbol
    """
    animations: List[SpriteAnimation] = field(default_factory=list)
    layers: Dict[str, Layer] = field(default_factory=dict)
    keyframes: Dict[str, Keyframe] = field(default_factory=dict)
    symbols: Dict[str, Symbol] = field(default_factory=dict)

    @property
    def spritesheet_group(self) -> str:
        return spritesheet_group(self.plugin_metadata)

    def find_layer(self, layer_id: str) -> Optional[Layer]:
        return self.layers.get(layer_id)

    def find_keyframe(self, keyframe_id: Optional[str]) -> Optional[Keyframe]:
        if not keyframe_id:
            return None
        return self.keyframes.get(keyframe_id)

    def find_symbol(self, symbol_id: Optional[str]) -> Optional[Symbol]:
        if not symbol_id:
            return None
        return self.symbols.get(symbol_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SpriteEntityMetadata':
        animations = [
            SpriteAnimation(name=a.get('name', ''),
                            layer_ids=list(a.get('layers') or []),
                            plugin_metadata=dict(a.get('pluginMetadata') or {}))
            for a in data.get('animations') or []
        ]

        layers: Dict[str, Layer] = {}
        for entry in data.get('layers') or []:
            layer = Layer(
                id=entry.get('$id', ''),
                name=entry.get('name', ''),
                type=entry.get('type', ''),
                keyframe_ids=list(entry.get('keyframes') or []),
                plugin_metadata=dict(entry.get('pluginMetadata') or {}),
                tile_width=entry.get('tileWidth'),
                tile_height=entry.get('tileHeight'),
                language=entry.get('language'),
            )
            layers[layer.id] = layer

        keyframes: Dict[str, Keyframe] = {}
        for entry in data.get('keyframes') or []:
            keyframe = Keyframe(
                id=entry.get('$id', ''),
                type=entry.get('type', ''),
                length=max(1, int(entry.get('length', 1))),
                symbol_id=entry.get('symbol'),
                tweened=bool(entry.get('tweened', False)),
                tween_type=entry.get('tweenType'),
                plugin_metadata=dict(entry.get('pluginMetadata') or {}),
                code=entry.get('code'),
                name=entry.get('name'),
            )
            keyframes[keyframe.id] = keyframe

        symbols: Dict[str, Symbol] = {}
        for entry in data.get('symbols') or []:
            symbol = parse_symbol(entry)
            if symbol is not None:
                symbols[symbol.id] = symbol

        return cls(animations=animations, layers=layers, keyframes=keyframes,
                   symbols=symbols, **cls._common_fields(data))


@dataclass
class AssetEntry:
    """
    Loaded asset: metadata plus whatever payload the host supplied.

    Attributes:
        metadata: Parsed metadata record
        filename: Source filename, used in diagnostics
        data: Raw file bytes (images, audio, binary)
        pixels: Decoded image, filled by the media loader
    """
    metadata: AssetMetadata
    filename: str = ''
    data: Optional[bytes] = None
    pixels: Optional[Any] = None

    @property
    def guid(self) -> str:
        return self.metadata.guid


@dataclass
class OutputFolder:
    id: str
    path: str
