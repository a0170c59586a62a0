from __future__ import annotations

from .nback_core import (
    DEFAULT_CONFIG,
    Block,
    NBackConfig,
    TargetType,
    Trial,
    check_interval,
)
from .random_source import RandomSource


class SequenceGenerator:
    """Builds blocks that hit the target-type quotas exactly.

    - Positions ``0..n`` are free draws with no back-reference to match.
    - Every later position takes one target type, picked uniformly from the
      types that still have quota left. A type leaves the candidate list the
      moment its quota hits zero, so every draw lands on a usable type.
    """

    def __init__(self, rng: RandomSource, *, config: NBackConfig = DEFAULT_CONFIG) -> None:
        self._rng = rng
        self._config = config

    @property
    def config(self) -> NBackConfig:
        return self._config

    def generate(self, interval: int) -> Block:
        n = check_interval(interval)
        cfg = self._config

        audio: list[int] = []
        visual: list[int] = []
        for _ in range(n + 1):
            visual.append(self._rng.next_int(cfg.visual_symbols))
            audio.append(self._rng.next_int(cfg.audio_symbols))

        live = [[kind, quota] for kind, quota in cfg.quotas().items() if quota > 0]
        for p in range(n + 1, cfg.block_length(n)):
            slot = live[self._rng.next_int(len(live))]
            kind = slot[0]
            slot[1] -= 1
            if slot[1] == 0:
                live.remove(slot)

            prev_visual = visual[p - n]
            prev_audio = audio[p - n]
            if kind in (TargetType.VISUAL_ONLY, TargetType.BOTH):
                visual.append(prev_visual)
            else:
                visual.append(self._draw_except(cfg.visual_symbols, prev_visual))
            if kind in (TargetType.AUDIO_ONLY, TargetType.BOTH):
                audio.append(prev_audio)
            else:
                audio.append(self._draw_except(cfg.audio_symbols, prev_audio))

        trials = tuple(
            Trial(audio_symbol=a, visual_symbol=v, guessable=(i > n))
            for i, (a, v) in enumerate(zip(audio, visual))
        )
        return Block(interval=n, trials=trials)

    def _draw_except(self, size: int, excluded: int) -> int:
        """Uniform draw from ``[0, size)`` minus ``excluded``, in a single call."""

        k = self._rng.next_int(size - 1)
        return k + 1 if k >= excluded else k
