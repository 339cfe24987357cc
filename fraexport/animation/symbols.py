"""
Compact symbol payloads and their tween writers.

Field order of the `data` array per symbol type:

    IMAGE           x, y, alpha, pivotX, pivotY, rotation, scaleX, scaleY, sheetIndex, frameIndex
    COLLISION_BOX   x, y, alpha, pivotX, pivotY, rotation, scaleX, scaleY   (+ color)
    POLYGON         x, y, alpha, rotation                                    (+ color, points)
    LINE_SEGMENT    alpha                                                    (+ color, points)
    COLLISION_BODY  head, hipWidth, hipXOffset, hipYOffset, foot             (+ color)
    POINT           x, y, alpha, rotation                                    (+ color)
    TILEMAP         x, y, alpha, pivotX, pivotY, rotation, scaleX, scaleY   (+ tiles)

Image payloads need a sprite frame and are built by the flattener.
"""

from typing import Any, Callable, Dict, List, Optional

from fraexport.imaging import Point
from fraexport.project import (
    CollisionBodySymbol, CollisionBoxSymbol, ImageSymbol, LineSegmentSymbol, PointSymbol,
    PolygonSymbol, TilemapSymbol, engine_metadata,
)
from .tween import calculate_tweened_symbol_position, interpolate, trim_corrected_position


def _transform_data(symbol) -> List[float]:
    return [symbol.x, symbol.y, symbol.alpha, symbol.pivot_x, symbol.pivot_y,
            symbol.rotation, symbol.scale_x, symbol.scale_y]


def _collision_box(symbol: CollisionBoxSymbol) -> Dict[str, Any]:
    return {'color': symbol.color, 'data': _transform_data(symbol)}


def _polygon(symbol: PolygonSymbol) -> Dict[str, Any]:
    return {'color': symbol.color,
            'data': [symbol.x, symbol.y, symbol.alpha, symbol.rotation],
            'points': list(symbol.points)}


def _line_segment(symbol: LineSegmentSymbol) -> Dict[str, Any]:
    return {'color': symbol.color, 'data': [symbol.alpha], 'points': list(symbol.points)}


def _collision_body(symbol: CollisionBodySymbol) -> Dict[str, Any]:
    return {'color': symbol.color,
            'data': [symbol.head, symbol.hip_width, symbol.hip_x_offset, symbol.hip_y_offset, symbol.foot]}


def _point(symbol: PointSymbol) -> Dict[str, Any]:
    return {'color': symbol.color, 'data': [symbol.x, symbol.y, symbol.alpha, symbol.rotation]}


def _tilemap(symbol: TilemapSymbol) -> Dict[str, Any]:
    return {'data': _transform_data(symbol), 'tiles': list(symbol.tiles)}


PAYLOAD_BUILDERS: Dict[str, Callable[[Any], Dict[str, Any]]] = {
    CollisionBoxSymbol.type: _collision_box,
    PolygonSymbol.type: _polygon,
    LineSegmentSymbol.type: _line_segment,
    CollisionBodySymbol.type: _collision_body,
    PointSymbol.type: _point,
    TilemapSymbol.type: _tilemap,
}


def symbol_payload(symbol) -> Dict[str, Any]:
    """Compact output form of a non-image symbol."""
    payload = PAYLOAD_BUILDERS[symbol.type](symbol)
    payload['metadata'] = engine_metadata(symbol.plugin_metadata)
    return payload


# =============================================================================
# Tween writers
#
# Each writer overwrites the interpolated slots of a copied `data` array in
# place. Slots not written (sheet/frame indices) keep the current symbol's
# values, as do color, points and tiles outside the array.
# =============================================================================

def _tween_transform(data: List[float], symbol, next_symbol, t: float, ease) -> None:
    x, y = calculate_tweened_symbol_position(symbol, next_symbol, t, ease)
    data[0] = x
    data[1] = y
    data[2] = interpolate(symbol.alpha, next_symbol.alpha, t, ease)
    data[3] = interpolate(symbol.pivot_x, next_symbol.pivot_x, t, ease)
    data[4] = interpolate(symbol.pivot_y, next_symbol.pivot_y, t, ease)
    data[5] = interpolate(symbol.rotation, next_symbol.rotation, t, ease)
    data[6] = interpolate(symbol.scale_x, next_symbol.scale_x, t, ease)
    data[7] = interpolate(symbol.scale_y, next_symbol.scale_y, t, ease)


def _tween_image(data, symbol, next_symbol, t, ease, trim: Optional[Point]):
    _tween_transform(data, symbol, next_symbol, t, ease)
    if trim is not None:
        data[0], data[1] = trim_corrected_position(data[0], data[1], trim.x, trim.y,
                                                   data[5], data[6], data[7])


def _tween_collision_box(data, symbol, next_symbol, t, ease, trim):
    _tween_transform(data, symbol, next_symbol, t, ease)


def _tween_tilemap(data, symbol, next_symbol, t, ease, trim):
    _tween_transform(data, symbol, next_symbol, t, ease)


def _tween_positioned(data, symbol, next_symbol, t, ease, trim):
    # POINT and POLYGON: x, y, alpha, rotation
    data[0] = interpolate(symbol.x, next_symbol.x, t, ease)
    data[1] = interpolate(symbol.y, next_symbol.y, t, ease)
    data[2] = interpolate(symbol.alpha, next_symbol.alpha, t, ease)
    data[3] = interpolate(symbol.rotation, next_symbol.rotation, t, ease)


def _tween_line_segment(data, symbol, next_symbol, t, ease, trim):
    data[0] = interpolate(symbol.alpha, next_symbol.alpha, t, ease)


def _tween_collision_body(data, symbol, next_symbol, t, ease, trim):
    data[0] = interpolate(symbol.head, next_symbol.head, t, ease)
    data[1] = interpolate(symbol.hip_width, next_symbol.hip_width, t, ease)
    data[2] = interpolate(symbol.hip_x_offset, next_symbol.hip_x_offset, t, ease)
    data[3] = interpolate(symbol.hip_y_offset, next_symbol.hip_y_offset, t, ease)
    data[4] = interpolate(symbol.foot, next_symbol.foot, t, ease)


TWEEN_WRITERS = {
    ImageSymbol.type: _tween_image,
    CollisionBoxSymbol.type: _tween_collision_box,
    TilemapSymbol.type: _tween_tilemap,
    PolygonSymbol.type: _tween_positioned,
    PointSymbol.type: _tween_positioned,
    LineSegmentSymbol.type: _tween_line_segment,
    CollisionBodySymbol.type: _tween_collision_body,
}
