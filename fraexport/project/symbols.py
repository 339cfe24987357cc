"""
Symbol variants placed on keyframes.

The variant set is closed; each dataclass carries only the fields of its
kind and a `type` tag matching the editor's keyframe/layer type.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Union

from fraexport.utils import logWarning


@dataclass
class BaseSymbol:
    id: str
    plugin_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransformSymbol(BaseSymbol):
    """Symbol with a full 2D transform (position, pivot, rotation, scale)."""
    x: float = 0
    y: float = 0
    alpha: float = 1
    pivot_x: float = 0
    pivot_y: float = 0
    rotation: float = 0
    scale_x: float = 1
    scale_y: float = 1


@dataclass
class ImageSymbol(TransformSymbol):
    type: ClassVar[str] = 'IMAGE'
    image_asset: str = ''


@dataclass
class CollisionBoxSymbol(TransformSymbol):
    type: ClassVar[str] = 'COLLISION_BOX'
    color: Optional[str] = None


@dataclass
class TilemapSymbol(TransformSymbol):
    type: ClassVar[str] = 'TILEMAP'
    tiles: List[int] = field(default_factory=list)


@dataclass
class PolygonSymbol(BaseSymbol):
    type: ClassVar[str] = 'POLYGON'
    x: float = 0
    y: float = 0
    alpha: float = 1
    rotation: float = 0
    color: Optional[str] = None
    points: List[float] = field(default_factory=list)


@dataclass
class LineSegmentSymbol(BaseSymbol):
    type: ClassVar[str] = 'LINE_SEGMENT'
    alpha: float = 1
    color: Optional[str] = None
    points: List[float] = field(default_factory=list)


@dataclass
class CollisionBodySymbol(BaseSymbol):
    type: ClassVar[str] = 'COLLISION_BODY'
    head: float = 0
    hip_width: float = 0
    hip_x_offset: float = 0
    hip_y_offset: float = 0
    foot: float = 0
    color: Optional[str] = None


@dataclass
class PointSymbol(BaseSymbol):
    type: ClassVar[str] = 'POINT'
    x: float = 0
    y: float = 0
    alpha: float = 1
    rotation: float = 0
    color: Optional[str] = None


Symbol = Union[ImageSymbol, CollisionBoxSymbol, PolygonSymbol, LineSegmentSymbol,
               CollisionBodySymbol, PointSymbol, TilemapSymbol]

SYMBOL_CLASSES = {cls.type: cls for cls in (
    ImageSymbol, CollisionBoxSymbol, PolygonSymbol, LineSegmentSymbol,
    CollisionBodySymbol, PointSymbol, TilemapSymbol,
)}

# camelCase editor key -> dataclass field
_FIELD_NAMES = {
    'x': 'x',
    'y': 'y',
    'alpha': 'alpha',
    'pivotX': 'pivot_x',
    'pivotY': 'pivot_y',
    'rotation': 'rotation',
    'scaleX': 'scale_x',
    'scaleY': 'scale_y',
    'imageAsset': 'image_asset',
    'color': 'color',
    'points': 'points',
    'tiles': 'tiles',
    'head': 'head',
    'hipWidth': 'hip_width',
    'hipXOffset': 'hip_x_offset',
    'hipYOffset': 'hip_y_offset',
    'foot': 'foot',
}


def parse_symbol(data: Dict[str, Any]) -> Optional[Symbol]:
    """
    Build the symbol variant matching data['type'].

    Returns:
        Symbol, or None (with a warning) for an unknown type
    """
    symbol_type = data.get('type')
    cls = SYMBOL_CLASSES.get(symbol_type)
    if cls is None:
        logWarning(f"Unknown symbol type '{symbol_type}' for symbol id: {data.get('$id')}")
        return None

    allowed = cls.__dataclass_fields__
    kwargs = {}
    for key, name in _FIELD_NAMES.items():
        if key in data and name in allowed and data[key] is not None:
            value = data[key]
            kwargs[name] = list(value) if isinstance(value, (list, tuple)) else value

    return cls(id=data.get('$id', ''),
               plugin_metadata=dict(data.get('pluginMetadata') or {}),
               **kwargs)
