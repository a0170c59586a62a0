from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from .nback_core import Block, GameState, Guess, Trial

logger = logging.getLogger(__name__)


def correct_answer(trial: Trial, back_reference: Trial) -> Guess:
    """Objective answer for ``trial`` judged against the trial ``n`` back."""

    same_visual = trial.visual_symbol == back_reference.visual_symbol
    same_audio = trial.audio_symbol == back_reference.audio_symbol
    if same_visual and same_audio:
        return Guess.BOTH
    if same_visual:
        return Guess.VISUAL_ONLY
    if same_audio:
        return Guess.AUDIO_ONLY
    return Guess.NO_REPETITION


def mistakes_for(guess: Guess, expected: Guess) -> tuple[int, int]:
    """Return ``(visual, audio)`` mistake increments for one answer.

    A missed repetition is charged to the channel(s) that repeated. When
    nothing repeated, every channel the trainee claimed is charged instead.
    """

    if guess is expected:
        return (0, 0)
    if expected is Guess.NO_REPETITION:
        blamed = guess
    else:
        blamed = expected
    return (int(blamed.claims_visual), int(blamed.claims_audio))


@dataclass(frozen=True, slots=True)
class GuessOutcome:
    state: GameState
    is_correct: bool
    expected: Guess | None  # None on positions with nothing to judge


class ResponseEvaluator:
    def evaluate(self, *, state: GameState, block: Block, guess: Guess) -> GuessOutcome:
        index = state.trial_index
        trial = block[index]
        back = block.back_reference(index)
        advanced = replace(state, trial_index=index + 1)

        if not trial.guessable or back is None:
            logger.debug("trial %d: not guessable, accepted", index)
            return GuessOutcome(state=advanced, is_correct=True, expected=None)

        expected = correct_answer(trial, back)
        visual, audio = mistakes_for(guess, expected)
        is_correct = guess is expected
        logger.debug(
            "trial %d: guess=%s expected=%s correct=%s", index, guess.value, expected.value, is_correct
        )
        return GuessOutcome(
            state=replace(
                advanced,
                visual_mistakes=state.visual_mistakes + visual,
                audio_mistakes=state.audio_mistakes + audio,
                correct=state.correct + (1 if is_correct else 0),
            ),
            is_correct=is_correct,
            expected=expected,
        )
