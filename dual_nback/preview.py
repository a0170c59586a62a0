from __future__ import annotations

from dataclasses import dataclass

from .evaluator import correct_answer
from .nback_core import DEFAULT_CONFIG, Block, Guess, NBackConfig
from .random_source import RandomSource, SeededRandomSource
from .results import BlockRecord, DaySummary, summarize_day
from .session import SessionOrchestrator

_GUESSES: tuple[Guess, ...] = tuple(Guess)


def format_block(block: Block) -> str:
    """Render a block as one row per trial: index, symbols, expected answer."""

    lines = [f"n={block.interval} trials={len(block)}", " idx  audio  visual  expected"]
    for i, trial in enumerate(block.trials):
        back = block.back_reference(i)
        if trial.guessable and back is not None:
            expected = correct_answer(trial, back).value
        else:
            expected = "-"
        lines.append(f"{i:4d}  {trial.audio_symbol:5d}  {trial.visual_symbol:6d}  {expected}")
    return "\n".join(lines)


class ScriptedTrainee:
    """Answers correctly except on a seeded ``error_rate`` fraction of trials."""

    def __init__(self, rng: RandomSource, *, error_rate: float) -> None:
        if not (0.0 <= error_rate <= 1.0):
            raise ValueError("error_rate must be in [0.0, 1.0]")
        self._rng = rng
        self._error_per_mille = int(round(error_rate * 1000.0))

    def answer(self, expected: Guess | None) -> Guess:
        truth = Guess.NO_REPETITION if expected is None else expected
        if self._rng.next_int(1000) >= self._error_per_mille:
            return truth
        others = [g for g in _GUESSES if g is not truth]
        return others[self._rng.next_int(len(others))]


@dataclass(frozen=True, slots=True)
class SimulationResult:
    records: list[BlockRecord]
    summary: DaySummary


def simulate_day(
    *,
    seed: int,
    initial_interval: int = 1,
    error_rate: float = 0.1,
    config: NBackConfig = DEFAULT_CONFIG,
) -> SimulationResult:
    """Play a whole day headlessly and return the block history."""

    engine = SessionOrchestrator(SeededRandomSource(seed), initial_interval, config=config)
    trainee = ScriptedTrainee(SeededRandomSource(seed + 1), error_rate=error_rate)

    engine.prepare_block()
    while not engine.is_current_day_finished():
        while not engine.is_current_block_finished():
            engine.submit_guess(trainee.answer(engine.expected_answer()))
        engine.advance_block()

    records = engine.history()
    return SimulationResult(records=records, summary=summarize_day(records))
