from __future__ import annotations

from .nback_core import DEFAULT_CONFIG, NBackConfig, check_interval


class DifficultyController:
    """Between-block adaptation of the interval.

    Both channels must agree on the direction: fewer than ``lower_mistake_limit``
    mistakes in each raises n by one, more than ``upper_mistake_limit`` in each
    lowers it by one (never below 1). Any other mix leaves n alone.
    """

    def __init__(self, *, config: NBackConfig = DEFAULT_CONFIG) -> None:
        self._lower = config.lower_mistake_limit
        self._upper = config.upper_mistake_limit

    def adjust(self, *, visual_mistakes: int, audio_mistakes: int, current_n: int) -> int:
        n = check_interval(current_n)
        if visual_mistakes < self._lower and audio_mistakes < self._lower:
            return n + 1
        if visual_mistakes > self._upper and audio_mistakes > self._upper:
            return max(n - 1, 1)
        return n
