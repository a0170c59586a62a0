from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BlockRecord:
    """Outcome of one completed block, appended by the orchestrator."""

    block_index: int
    interval: int
    visual_mistakes: int
    audio_mistakes: int
    correct: int
    guessable_trials: int
    next_interval: int

    @property
    def accuracy(self) -> float:
        return 0.0 if self.guessable_trials == 0 else self.correct / self.guessable_trials


@dataclass(frozen=True, slots=True)
class DaySummary:
    blocks: int
    start_interval: int
    final_interval: int
    peak_interval: int
    mean_interval: float
    correct: int
    guessable_trials: int
    accuracy: float
    visual_mistakes: int
    audio_mistakes: int


def summarize_day(records: list[BlockRecord]) -> DaySummary:
    """Fold the per-block history of a day into one summary.

    ``final_interval`` is the interval the next block would be played at.
    """

    if not records:
        raise ValueError("cannot summarize a day with no completed blocks")

    intervals = [r.interval for r in records]
    correct = sum(r.correct for r in records)
    guessable = sum(r.guessable_trials for r in records)
    return DaySummary(
        blocks=len(records),
        start_interval=intervals[0],
        final_interval=records[-1].next_interval,
        peak_interval=max(intervals),
        mean_interval=float(sum(intervals)) / float(len(intervals)),
        correct=correct,
        guessable_trials=guessable,
        accuracy=0.0 if guessable == 0 else correct / guessable,
        visual_mistakes=sum(r.visual_mistakes for r in records),
        audio_mistakes=sum(r.audio_mistakes for r in records),
    )
