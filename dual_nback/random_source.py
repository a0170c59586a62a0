from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    """Uniform integer sampler.

    Core logic depends on this interface rather than calling ``random`` directly,
    so a fixed seed always reproduces the same blocks.
    """

    def next_int(self, bound: int) -> int:
        """Return an integer in ``[0, bound)``."""


class SeededRandomSource:
    """Production source backed by a private ``random.Random`` stream."""

    def __init__(self, seed: int) -> None:
        self._seed = int(seed)
        self._rng = random.Random(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def next_int(self, bound: int) -> int:
        if bound < 1:
            raise ValueError("bound must be >= 1")
        return self._rng.randrange(int(bound))
