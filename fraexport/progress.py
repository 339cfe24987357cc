"""
Export progress.

An export runs in three phases with fixed weights. Overall progress is a
pure function of (phase, ratio within phase); the reporter only adds the
guarantee that values handed to the sink never decrease.
"""

from enum import Enum
from typing import Callable, Optional


class Phase(Enum):
    MEDIA = 'media'
    FLATTEN = 'flatten'
    WRITE = 'write'


PHASE_ORDER = (Phase.MEDIA, Phase.FLATTEN, Phase.WRITE)

PHASE_WEIGHTS = {
    Phase.MEDIA: 0.30,
    Phase.FLATTEN: 0.69,
    Phase.WRITE: 0.01,
}


def overall_progress(phase: Phase, ratio: float) -> int:
    """
    Overall percentage for a position within a phase.

    Args:
        phase: Current phase
        ratio: Completed fraction of that phase (clamped to [0, 1])

    Returns:
        Integer percentage 0-100
    """
    ratio = min(max(ratio, 0.0), 1.0)
    completed = 0.0
    for earlier in PHASE_ORDER:
        if earlier is phase:
            break
        completed += PHASE_WEIGHTS[earlier]
    value = round(100 * (completed + PHASE_WEIGHTS[phase] * ratio))
    return min(max(value, 0), 100)


class ProgressReporter:
    """
    Forwards monotonic progress values to a sink.

    Reports that would move progress backwards repeat the last value
    instead; repeated values are passed through.
    """

    def __init__(self, sink: Optional[Callable[[int], None]] = None):
        self.sink = sink
        self.value = 0

    def report(self, phase: Phase, done: int, total: int):
        """Report `done` of `total` units of a phase (an empty phase counts as complete)."""
        ratio = done / total if total > 0 else 1.0
        self.report_ratio(phase, ratio)

    def report_ratio(self, phase: Phase, ratio: float):
        self.value = max(self.value, overall_progress(phase, ratio))
        if self.sink is not None:
            self.sink(self.value)

    def complete(self):
        self.report_ratio(Phase.WRITE, 1.0)
