from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class ConfigurationError(ValueError):
    """Engine parameters that can never produce a valid block."""


class SequenceExhaustionError(ConfigurationError):
    """A "no repeat" draw has no symbol left to choose from."""


class StateError(RuntimeError):
    """An orchestrator operation was called in the wrong session phase."""


class Guess(str, Enum):
    NO_REPETITION = "no_repetition"
    AUDIO_ONLY = "audio_only"
    VISUAL_ONLY = "visual_only"
    BOTH = "both"

    @property
    def claims_audio(self) -> bool:
        return self in (Guess.AUDIO_ONLY, Guess.BOTH)

    @property
    def claims_visual(self) -> bool:
        return self in (Guess.VISUAL_ONLY, Guess.BOTH)


class TargetType(str, Enum):
    NON_TARGET = "non_target"
    AUDIO_ONLY = "audio_only"
    VISUAL_ONLY = "visual_only"
    BOTH = "both"


@dataclass(frozen=True, slots=True)
class NBackConfig:
    # Jaeggi et al. (2008): 20 + n trials per block, six auditory and six visual
    # targets of which two are in both modalities, 20 blocks per daily session.
    block_size: int = 20
    audio_targets: int = 6
    visual_targets: int = 6
    both_targets: int = 2

    audio_symbols: int = 8
    visual_symbols: int = 8

    lower_mistake_limit: int = 3
    upper_mistake_limit: int = 5

    blocks_per_day: int = 20

    def __post_init__(self) -> None:
        if self.block_size < 1:
            raise ConfigurationError("block_size must be >= 1")
        if self.blocks_per_day < 1:
            raise ConfigurationError("blocks_per_day must be >= 1")
        if self.lower_mistake_limit > self.upper_mistake_limit:
            raise ConfigurationError("lower_mistake_limit must be <= upper_mistake_limit")
        for kind, quota in self.quotas().items():
            if quota < 0:
                raise ConfigurationError(f"{kind.value} quota must be >= 0, got {quota}")
        if sum(self.quotas().values()) != self.block_size:
            raise ConfigurationError("target quotas must sum to block_size")
        if self.audio_symbols < 2 or self.visual_symbols < 2:
            raise SequenceExhaustionError("symbol alphabets need at least 2 symbols")

    @property
    def non_targets(self) -> int:
        return self.block_size - self.audio_targets - self.visual_targets + self.both_targets

    def quotas(self) -> dict[TargetType, int]:
        """Per-block count of each target type, in draw order."""

        return {
            TargetType.NON_TARGET: self.non_targets,
            TargetType.AUDIO_ONLY: self.audio_targets - self.both_targets,
            TargetType.VISUAL_ONLY: self.visual_targets - self.both_targets,
            TargetType.BOTH: self.both_targets,
        }

    def block_length(self, interval: int) -> int:
        return interval + 1 + self.block_size


DEFAULT_CONFIG = NBackConfig()


def check_interval(interval: int) -> int:
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise ConfigurationError(f"interval must be an int, got {interval!r}")
    if interval < 1:
        raise ConfigurationError(f"interval must be >= 1, got {interval}")
    return interval


@dataclass(frozen=True, slots=True)
class Trial:
    audio_symbol: int
    visual_symbol: int
    guessable: bool


@dataclass(frozen=True, slots=True)
class Block:
    """One play unit: ``interval + 1`` free trials, then the constrained ones."""

    interval: int
    trials: tuple[Trial, ...]

    def __len__(self) -> int:
        return len(self.trials)

    def __getitem__(self, index: int) -> Trial:
        return self.trials[index]

    def back_reference(self, index: int) -> Trial | None:
        if index < self.interval:
            return None
        return self.trials[index - self.interval]


@dataclass(frozen=True, slots=True)
class GameState:
    interval: int = 1
    block_index: int = 0
    trial_index: int = 0
    visual_mistakes: int = 0
    audio_mistakes: int = 0
    correct: int = 0

    def fresh_block(self) -> GameState:
        return replace(self, trial_index=0, visual_mistakes=0, audio_mistakes=0, correct=0)

    def day_start(self) -> GameState:
        return replace(self.fresh_block(), block_index=0)
