from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum

from .difficulty import DifficultyController
from .evaluator import ResponseEvaluator, correct_answer
from .nback_core import (
    DEFAULT_CONFIG,
    Block,
    GameState,
    Guess,
    NBackConfig,
    StateError,
    Trial,
    check_interval,
)
from .random_source import RandomSource
from .results import BlockRecord
from .sequence import SequenceGenerator

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    BLOCK_START = "block_start"
    IN_BLOCK = "in_block"
    BLOCK_COMPLETE = "block_complete"
    DAY_COMPLETE = "day_complete"


class SessionEventKind(str, Enum):
    BLOCK_PREPARED = "block_prepared"
    TRIAL_ADVANCED = "trial_advanced"
    BLOCK_FINISHED = "block_finished"
    DAY_FINISHED = "day_finished"


@dataclass(frozen=True, slots=True)
class SessionEvent:
    kind: SessionEventKind
    state: GameState
    is_correct: bool | None = None


SessionListener = Callable[[SessionEvent], None]


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """View model for a presentation layer (pure data)."""

    phase: SessionPhase
    interval: int
    block_index: int
    trial_index: int
    block_length: int
    trial: Trial | None
    visual_mistakes: int
    audio_mistakes: int


class SessionOrchestrator:
    """Runs a training day: prepare -> play trials -> adapt n -> next block.

    - Deterministic: every block is drawn from the injected RandomSource.
    - Single-threaded: the caller submits exactly one guess per trial.
    - Abandoning a block is just calling ``prepare_block()`` again.
    """

    def __init__(
        self,
        rng: RandomSource,
        initial_interval: int = 1,
        *,
        config: NBackConfig = DEFAULT_CONFIG,
    ) -> None:
        self._config = config
        self._generator = SequenceGenerator(rng, config=config)
        self._evaluator = ResponseEvaluator()
        self._controller = DifficultyController(config=config)

        self._state = GameState(interval=check_interval(initial_interval))
        self._phase = SessionPhase.BLOCK_START
        self._block: Block | None = None
        self._history: list[BlockRecord] = []
        self._listeners: list[SessionListener] = []

    @property
    def config(self) -> NBackConfig:
        return self._config

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def block(self) -> Block | None:
        return self._block

    @property
    def interval(self) -> int:
        return self._state.interval

    @interval.setter
    def interval(self, n: int) -> None:
        # The active block keeps its own interval; the new value applies from the next one.
        self._state = replace(self._state, interval=check_interval(n))

    def history(self) -> list[BlockRecord]:
        return list(self._history)

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        self._listeners.remove(listener)

    def new_day(self) -> None:
        self._state = self._state.day_start()
        self._phase = SessionPhase.BLOCK_START
        self._block = None
        self._history.clear()
        logger.info("new day at n=%d", self._state.interval)

    def prepare_block(self) -> None:
        if self._phase is SessionPhase.DAY_COMPLETE:
            raise StateError("day is complete; call new_day() first")
        if self._phase is SessionPhase.IN_BLOCK:
            logger.info(
                "abandoning block %d at trial %d", self._state.block_index, self._state.trial_index
            )
        self._state = self._state.fresh_block()
        self._block = self._generator.generate(self._state.interval)
        self._phase = SessionPhase.IN_BLOCK
        logger.info(
            "block %d prepared: n=%d, %d trials",
            self._state.block_index,
            self._block.interval,
            len(self._block),
        )
        self._emit(SessionEvent(kind=SessionEventKind.BLOCK_PREPARED, state=self._state))

    def current_trial(self) -> Trial:
        block = self._require_in_block("current_trial")
        return block[self._state.trial_index]

    def expected_answer(self) -> Guess | None:
        """Correct answer for the current trial, or None when nothing can be judged."""

        block = self._require_in_block("expected_answer")
        index = self._state.trial_index
        back = block.back_reference(index)
        if not block[index].guessable or back is None:
            return None
        return correct_answer(block[index], back)

    def submit_guess(self, guess: Guess) -> bool:
        block = self._require_in_block("submit_guess")
        outcome = self._evaluator.evaluate(state=self._state, block=block, guess=Guess(guess))
        self._state = outcome.state
        finished = self._state.trial_index >= len(block)
        if finished:
            self._phase = SessionPhase.BLOCK_COMPLETE
            logger.info(
                "block %d finished: visual_mistakes=%d audio_mistakes=%d",
                self._state.block_index,
                self._state.visual_mistakes,
                self._state.audio_mistakes,
            )

        # Listeners run only after state and phase are settled.
        self._emit(
            SessionEvent(kind=SessionEventKind.TRIAL_ADVANCED, state=self._state, is_correct=outcome.is_correct)
        )
        if finished:
            self._emit(SessionEvent(kind=SessionEventKind.BLOCK_FINISHED, state=self._state))
        return outcome.is_correct

    def advance_block(self) -> None:
        if self._phase is not SessionPhase.BLOCK_COMPLETE:
            raise StateError(f"advance_block() needs a finished block, phase is {self._phase.value}")
        assert self._block is not None

        s = self._state
        new_n = self._controller.adjust(
            visual_mistakes=s.visual_mistakes,
            audio_mistakes=s.audio_mistakes,
            current_n=s.interval,
        )
        self._history.append(
            BlockRecord(
                block_index=s.block_index,
                interval=self._block.interval,
                visual_mistakes=s.visual_mistakes,
                audio_mistakes=s.audio_mistakes,
                correct=s.correct,
                guessable_trials=sum(1 for t in self._block.trials if t.guessable),
                next_interval=new_n,
            )
        )
        if new_n != s.interval:
            logger.info("interval %d -> %d", s.interval, new_n)

        self._state = replace(s, interval=new_n, block_index=s.block_index + 1)
        if self.is_current_day_finished():
            self._state = self._state.fresh_block()
            self._phase = SessionPhase.DAY_COMPLETE
            self._block = None
            logger.info("day finished after %d blocks", self._state.block_index)
            self._emit(SessionEvent(kind=SessionEventKind.DAY_FINISHED, state=self._state))
            return
        self.prepare_block()

    def is_current_block_finished(self) -> bool:
        return self._block is not None and self._state.trial_index >= len(self._block)

    def is_current_day_finished(self) -> bool:
        return self._state.block_index >= self._config.blocks_per_day

    def snapshot(self) -> SessionSnapshot:
        trial = None
        if self._phase is SessionPhase.IN_BLOCK:
            trial = self.current_trial()
        return SessionSnapshot(
            phase=self._phase,
            interval=self._state.interval,
            block_index=self._state.block_index,
            trial_index=self._state.trial_index,
            block_length=0 if self._block is None else len(self._block),
            trial=trial,
            visual_mistakes=self._state.visual_mistakes,
            audio_mistakes=self._state.audio_mistakes,
        )

    def _require_in_block(self, op: str) -> Block:
        if self._phase is not SessionPhase.IN_BLOCK:
            raise StateError(f"{op}() is only valid during a block, phase is {self._phase.value}")
        assert self._block is not None
        return self._block

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
