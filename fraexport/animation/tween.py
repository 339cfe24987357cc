"""
Tween Math

Easing curves, eased interpolation and the position helpers used when
synthesizing in-between keyframes.

Tween types use the editor's names (LINEAR, EASE_IN_QUAD, EASE_OUT_CUBIC,
...). Unknown names fall back to linear with a warning.
"""

import math
from typing import Callable, Dict, Optional, Tuple

from fraexport.utils import logWarning

LINEAR = 'LINEAR'

_BACK_OVERSHOOT = 1.70158


def _linear(t: float) -> float:
    return t


def _in_power(power: int) -> Callable[[float], float]:
    return lambda t: t ** power


def _out_power(power: int) -> Callable[[float], float]:
    return lambda t: 1 - (1 - t) ** power


def _in_out_power(power: int) -> Callable[[float], float]:
    def ease(t: float) -> float:
        if t < 0.5:
            return (2 ** (power - 1)) * t ** power
        return 1 - ((-2 * t + 2) ** power) / 2
    return ease


def _in_sine(t: float) -> float:
    return 1 - math.cos(t * math.pi / 2)


def _out_sine(t: float) -> float:
    return math.sin(t * math.pi / 2)


def _in_out_sine(t: float) -> float:
    return -(math.cos(math.pi * t) - 1) / 2


def _in_expo(t: float) -> float:
    return 0.0 if t == 0 else 2 ** (10 * t - 10)


def _out_expo(t: float) -> float:
    return 1.0 if t == 1 else 1 - 2 ** (-10 * t)


def _in_out_expo(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    if t < 0.5:
        return 2 ** (20 * t - 10) / 2
    return (2 - 2 ** (-20 * t + 10)) / 2


def _in_circ(t: float) -> float:
    return 1 - math.sqrt(1 - t * t)


def _out_circ(t: float) -> float:
    return math.sqrt(1 - (t - 1) ** 2)


def _in_out_circ(t: float) -> float:
    if t < 0.5:
        return (1 - math.sqrt(1 - (2 * t) ** 2)) / 2
    return (math.sqrt(1 - (-2 * t + 2) ** 2) + 1) / 2


def _in_back(t: float) -> float:
    c = _BACK_OVERSHOOT
    return (c + 1) * t ** 3 - c * t ** 2


def _out_back(t: float) -> float:
    c = _BACK_OVERSHOOT
    return 1 + (c + 1) * (t - 1) ** 3 + c * (t - 1) ** 2


def _in_out_back(t: float) -> float:
    c = _BACK_OVERSHOOT * 1.525
    if t < 0.5:
        return ((2 * t) ** 2 * ((c + 1) * 2 * t - c)) / 2
    return ((2 * t - 2) ** 2 * ((c + 1) * (t * 2 - 2) + c) + 2) / 2


def _out_bounce(t: float) -> float:
    n, d = 7.5625, 2.75
    if t < 1 / d:
        return n * t * t
    if t < 2 / d:
        t -= 1.5 / d
        return n * t * t + 0.75
    if t < 2.5 / d:
        t -= 2.25 / d
        return n * t * t + 0.9375
    t -= 2.625 / d
    return n * t * t + 0.984375


def _in_bounce(t: float) -> float:
    return 1 - _out_bounce(1 - t)


def _in_out_bounce(t: float) -> float:
    if t < 0.5:
        return (1 - _out_bounce(1 - 2 * t)) / 2
    return (1 + _out_bounce(2 * t - 1)) / 2


def _in_elastic(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    return -(2 ** (10 * t - 10)) * math.sin((t * 10 - 10.75) * (2 * math.pi / 3))


def _out_elastic(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    return 2 ** (-10 * t) * math.sin((t * 10 - 0.75) * (2 * math.pi / 3)) + 1


def _in_out_elastic(t: float) -> float:
    if t == 0 or t == 1:
        return float(t)
    c = 2 * math.pi / 4.5
    if t < 0.5:
        return -(2 ** (20 * t - 10) * math.sin((20 * t - 11.125) * c)) / 2
    return (2 ** (-20 * t + 10) * math.sin((20 * t - 11.125) * c)) / 2 + 1


EASING_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    LINEAR: _linear,
    'EASE_IN_QUAD': _in_power(2),
    'EASE_OUT_QUAD': _out_power(2),
    'EASE_IN_OUT_QUAD': _in_out_power(2),
    'EASE_IN_CUBIC': _in_power(3),
    'EASE_OUT_CUBIC': _out_power(3),
    'EASE_IN_OUT_CUBIC': _in_out_power(3),
    'EASE_IN_QUART': _in_power(4),
    'EASE_OUT_QUART': _out_power(4),
    'EASE_IN_OUT_QUART': _in_out_power(4),
    'EASE_IN_QUINT': _in_power(5),
    'EASE_OUT_QUINT': _out_power(5),
    'EASE_IN_OUT_QUINT': _in_out_power(5),
    'EASE_IN_SINE': _in_sine,
    'EASE_OUT_SINE': _out_sine,
    'EASE_IN_OUT_SINE': _in_out_sine,
    'EASE_IN_EXPO': _in_expo,
    'EASE_OUT_EXPO': _out_expo,
    'EASE_IN_OUT_EXPO': _in_out_expo,
    'EASE_IN_CIRC': _in_circ,
    'EASE_OUT_CIRC': _out_circ,
    'EASE_IN_OUT_CIRC': _in_out_circ,
    'EASE_IN_BACK': _in_back,
    'EASE_OUT_BACK': _out_back,
    'EASE_IN_OUT_BACK': _in_out_back,
    'EASE_IN_ELASTIC': _in_elastic,
    'EASE_OUT_ELASTIC': _out_elastic,
    'EASE_IN_OUT_ELASTIC': _in_out_elastic,
    'EASE_IN_BOUNCE': _in_bounce,
    'EASE_OUT_BOUNCE': _out_bounce,
    'EASE_IN_OUT_BOUNCE': _in_out_bounce,
}


def get_easing(tween_type: Optional[str]) -> Callable[[float], float]:
    """
    Look up the easing curve for a tween type name.

    Args:
        tween_type: Editor tween type name (case-insensitive), None for linear

    Returns:
        Function mapping t in [0, 1] to eased progress
    """
    if not tween_type:
        return _linear
    ease = EASING_FUNCTIONS.get(tween_type.upper())
    if ease is None:
        logWarning(f"Unknown tween type '{tween_type}', using {LINEAR}")
        return _linear
    return ease


def interpolate(start: float, end: float, t: float, ease: Callable[[float], float] = _linear) -> float:
    """Eased linear interpolation from start to end."""
    return start + (end - start) * ease(t)


def _rotate(x: float, y: float, degrees: float) -> Tuple[float, float]:
    rad = math.radians(degrees)
    cos_r, sin_r = math.cos(rad), math.sin(rad)
    return x * cos_r - y * sin_r, x * sin_r + y * cos_r


def _pivot_position(symbol) -> Tuple[float, float]:
    """World position of a symbol's pivot point."""
    dx, dy = _rotate(symbol.pivot_x * symbol.scale_x, symbol.pivot_y * symbol.scale_y, symbol.rotation)
    return symbol.x + dx, symbol.y + dy


def calculate_tweened_symbol_position(symbol, next_symbol, t: float,
                                      ease: Callable[[float], float] = _linear) -> Tuple[float, float]:
    """
    Tweened (x, y) origin of a transformable symbol.

    The pivot point travels in a straight line between the two keyframes
    while rotation, scale and pivot are interpolated; the origin is then
    recovered from the interpolated pivot so the symbol turns about its
    pivot instead of its top left corner. With equal pivots and scales and
    no rotation this reduces to plain interpolation of x and y.

    Args:
        symbol: Symbol on the tweened keyframe (x, y, pivot, rotation, scale)
        next_symbol: Symbol the tween moves towards
        t: Interpolation parameter in [0, 1]
        ease: Easing curve

    Returns:
        (x, y) tuple
    """
    start_x, start_y = _pivot_position(symbol)
    end_x, end_y = _pivot_position(next_symbol)

    pivot_world_x = interpolate(start_x, end_x, t, ease)
    pivot_world_y = interpolate(start_y, end_y, t, ease)
    rotation = interpolate(symbol.rotation, next_symbol.rotation, t, ease)
    scale_x = interpolate(symbol.scale_x, next_symbol.scale_x, t, ease)
    scale_y = interpolate(symbol.scale_y, next_symbol.scale_y, t, ease)
    pivot_x = interpolate(symbol.pivot_x, next_symbol.pivot_x, t, ease)
    pivot_y = interpolate(symbol.pivot_y, next_symbol.pivot_y, t, ease)

    dx, dy = _rotate(pivot_x * scale_x, pivot_y * scale_y, rotation)
    return pivot_world_x - dx, pivot_world_y - dy


def trim_corrected_position(x: float, y: float, trim_x: float, trim_y: float,
                            rotation: float, scale_x: float, scale_y: float) -> Tuple[float, float]:
    """
    Displace an image symbol's position by its sprite's trim offset.

    The packer drops transparent borders, so the drawn sprite starts at the
    trim offset (scaled) relative to the symbol origin. Under rotation the
    scaled offset vector is re-projected at the symbol's angle.
    """
    offset_x = trim_x * scale_x
    offset_y = trim_y * scale_y

    if rotation == 0:
        return x + offset_x, y + offset_y

    magnitude = math.hypot(offset_x, offset_y)
    offset_angle = math.degrees(math.atan2(offset_y, offset_x))
    angle = math.radians(360 - (rotation + offset_angle))
    return x + magnitude * math.cos(angle), y - magnitude * math.sin(angle)
