from __future__ import annotations

import pytest

from dual_nback.__main__ import main
from dual_nback.nback_core import Guess, NBackConfig
from dual_nback.preview import ScriptedTrainee, format_block, simulate_day
from dual_nback.random_source import SeededRandomSource
from dual_nback.results import BlockRecord, summarize_day
from dual_nback.sequence import SequenceGenerator
from dual_nback.session import SessionOrchestrator


def test_headless_block_at_interval_two() -> None:
    engine = SessionOrchestrator(SeededRandomSource(2024), 2)
    engine.prepare_block()
    block = engine.block
    assert block is not None
    assert len(block) == 23

    audio = visual = both = 0
    answers: list[Guess | None] = []
    while not engine.is_current_block_finished():
        i = engine.state.trial_index
        trial = engine.current_trial()
        assert trial.guessable is (i >= 3)

        expected = engine.expected_answer()
        answers.append(expected)
        if expected is not None:
            back = block[i - 2]
            assert (expected in (Guess.AUDIO_ONLY, Guess.BOTH)) is (trial.audio_symbol == back.audio_symbol)
            assert (expected in (Guess.VISUAL_ONLY, Guess.BOTH)) is (trial.visual_symbol == back.visual_symbol)
            audio += int(trial.audio_symbol == back.audio_symbol)
            visual += int(trial.visual_symbol == back.visual_symbol)
            both += int(expected is Guess.BOTH)
        assert engine.submit_guess(expected or Guess.NO_REPETITION) is True

    assert answers[:3] == [None, None, None]
    assert (audio, visual, both) == (6, 6, 2)


def test_same_seed_replays_same_day() -> None:
    r1 = simulate_day(seed=31, initial_interval=2, error_rate=0.15)
    r2 = simulate_day(seed=31, initial_interval=2, error_rate=0.15)
    assert r1 == r2
    assert r1.summary.blocks == 20


def test_perfect_trainee_climbs_every_block() -> None:
    result = simulate_day(seed=1, initial_interval=1, error_rate=0.0)
    assert [r.interval for r in result.records] == list(range(1, 21))
    assert result.summary.final_interval == 21
    assert result.summary.peak_interval == 20
    assert result.summary.accuracy == 1.0
    assert result.summary.visual_mistakes == 0


def test_always_wrong_trainee_stays_at_floor() -> None:
    result = simulate_day(seed=3, initial_interval=1, error_rate=1.0, config=NBackConfig(blocks_per_day=4))
    assert all(r.interval == 1 for r in result.records)
    assert result.summary.final_interval == 1
    assert result.summary.correct == 0


def test_scripted_trainee_rejects_bad_rate() -> None:
    with pytest.raises(ValueError):
        ScriptedTrainee(SeededRandomSource(0), error_rate=1.5)


def test_summarize_day() -> None:
    records = [
        BlockRecord(block_index=0, interval=2, visual_mistakes=1, audio_mistakes=0, correct=19, guessable_trials=20, next_interval=3),
        BlockRecord(block_index=1, interval=3, visual_mistakes=6, audio_mistakes=8, correct=10, guessable_trials=20, next_interval=2),
    ]
    s = summarize_day(records)
    assert s.blocks == 2
    assert (s.start_interval, s.final_interval, s.peak_interval) == (2, 2, 3)
    assert s.mean_interval == 2.5
    assert s.accuracy == pytest.approx(29 / 40)
    assert (s.visual_mistakes, s.audio_mistakes) == (7, 8)

    with pytest.raises(ValueError):
        summarize_day([])


def test_format_block_marks_free_trials() -> None:
    block = SequenceGenerator(SeededRandomSource(0)).generate(2)
    lines = format_block(block).splitlines()
    assert lines[0] == "n=2 trials=23"
    assert len(lines) == 2 + 23
    assert all(line.endswith("-") for line in lines[2:5])
    assert not any(line.endswith("-") for line in lines[5:])


def test_cli_preview_and_simulate(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["preview", "--interval", "2", "--seed", "1"]) == 0
    assert "n=2 trials=23" in capsys.readouterr().out

    assert main(["simulate", "--seed", "1", "--error-rate", "0"]) == 0
    out = capsys.readouterr().out
    assert "blocks=20" in out
    assert "accuracy=100.0%" in out
