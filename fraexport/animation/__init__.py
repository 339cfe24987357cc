"""
Animation Package

Flattens sprite entity timelines into compact symbol arrays and
synthesizes tween frames.
"""

from .tween import (
    EASING_FUNCTIONS, get_easing, interpolate, calculate_tweened_symbol_position,
    trim_corrected_position,
)
from .symbols import symbol_payload, PAYLOAD_BUILDERS, TWEEN_WRITERS
from .flattener import AnimationFlattener
