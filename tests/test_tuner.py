"""End-to-end tests: synthetic audio frames through the whole pipeline."""

import json

import numpy as np
import pytest

from guitar_tuner import STANDARD_TUNING, InvalidFrameError, Tuner, TunerConfig

from conftest import SAMPLE_RATE, sine_frame

TICK = 0.1


@pytest.fixture
def config():
    return TunerConfig(tolerance_cents=15.0, confirmation_delay=1.5)


def run_ticks(tuner, frame, count, clock):
    statuses = []
    for _ in range(count):
        statuses.append(tuner.process_tick(frame, SAMPLE_RATE))
        clock.advance(TICK)
    return statuses


def test_initial_status_targets_low_e(config):
    tuner = Tuner(config)
    assert tuner.status.target == STANDARD_TUNING[0]
    assert tuner.status.cents is None
    assert not tuner.status.complete


def test_in_tune_string_is_confirmed_after_delay(config, clock):
    tuner = Tuner(config, clock=clock)
    statuses = run_ticks(tuner, sine_frame(82.41), 20, clock)

    confirmed = [i for i, s in enumerate(statuses) if s.confirmed]
    assert len(confirmed) == 1
    assert confirmed[0] * TICK >= 1.5 - 1e-9
    assert statuses[0].in_tolerance
    assert statuses[0].note_name == "E"
    assert abs(statuses[0].cents) < 2.0
    assert tuner.session.index == 1


def test_confirmation_clears_smoothing_memory(config, clock):
    tuner = Tuner(config, clock=clock)
    statuses = run_ticks(tuner, sine_frame(82.41), 16, clock)
    assert statuses[-1].confirmed
    assert tuner.smoothed_frequency is None

    # The next string's first reading is not blended with the previous string
    status = tuner.process_tick(sine_frame(110.0), SAMPLE_RATE)
    assert status.target.note == "A"
    assert status.frequency == pytest.approx(110.0, abs=1.0)
    assert status.in_tolerance


def test_silence_resets_smoother(config, clock):
    tuner = Tuner(config, clock=clock)
    run_ticks(tuner, sine_frame(82.41), 3, clock)
    assert tuner.smoothed_frequency is not None

    status = tuner.process_tick(np.zeros(4096), SAMPLE_RATE)
    assert tuner.smoothed_frequency is None
    assert status.frequency is None
    assert status.cents is None
    assert not status.in_tolerance
    assert not status.pending


def test_out_of_tune_string_is_not_confirmed(config, clock):
    tuner = Tuner(config, clock=clock)
    # 87.31 Hz is an F, a semitone above the target
    statuses = run_ticks(tuner, sine_frame(87.31), 30, clock)
    assert not any(s.confirmed for s in statuses)
    assert statuses[-1].cents == pytest.approx(100.0, abs=3.0)
    assert tuner.session.index == 0


def test_full_session_with_events(config, clock):
    tuner = Tuner(config, clock=clock)
    confirmed = []
    completed = []
    tuner.events.on_string_confirmed(lambda target, status: confirmed.append(target.label))
    tuner.events.on_session_complete(completed.append)

    for target in STANDARD_TUNING:
        run_ticks(tuner, sine_frame(target.frequency), 20, clock)
        # A quiet gap before the next string is plucked
        run_ticks(tuner, np.zeros(4096), 1, clock)

    assert confirmed == ["sixth", "fifth", "fourth", "third", "second", "first"]
    assert len(completed) == 1
    assert tuner.status.complete

    # Ticks after completion leave the session untouched
    run_ticks(tuner, sine_frame(110.0), 5, clock)
    assert tuner.session.index == 5
    assert tuner.status.complete
    assert len(confirmed) == 6


def test_reset_returns_to_first_string(config, clock):
    tuner = Tuner(config, clock=clock)
    resets = []
    tuner.events.on_reset(lambda: resets.append(True))
    run_ticks(tuner, sine_frame(82.41), 16, clock)
    run_ticks(tuner, sine_frame(110.0), 3, clock)
    assert tuner.session.index == 1
    assert tuner.smoothed_frequency is not None

    tuner.reset()
    session = tuner.session
    assert session.index == 0
    assert session.deadline is None
    assert not session.all_tuned
    assert tuner.smoothed_frequency is None
    assert tuner.status.target == STANDARD_TUNING[0]
    assert resets == [True]


def test_failing_listener_does_not_break_tick(config, clock):
    tuner = Tuner(config, clock=clock)

    def broken(target, status):
        raise RuntimeError("listener failure")

    tuner.events.on_string_confirmed(broken)
    statuses = run_ticks(tuner, sine_frame(82.41), 16, clock)
    assert statuses[-1].confirmed


def test_explicit_timestamp_overrides_clock(config):
    tuner = Tuner(config, clock=lambda: 1000.0)
    frame = sine_frame(82.41)
    tuner.process_tick(frame, SAMPLE_RATE, now=0.0)
    assert tuner.session.deadline == pytest.approx(1.5)


@pytest.mark.parametrize(
    "frame, sample_rate",
    [(np.array([]), SAMPLE_RATE), (sine_frame(82.41), 0)],
)
def test_malformed_input_is_rejected(config, frame, sample_rate):
    tuner = Tuner(config)
    with pytest.raises(InvalidFrameError):
        tuner.process_tick(frame, sample_rate, now=0.0)


def test_status_serializes_to_json(config):
    tuner = Tuner(config)
    status = tuner.process_tick(sine_frame(82.41), SAMPLE_RATE, now=0.0)
    data = json.loads(json.dumps(status.to_dict()))
    assert data["target"]["label"] == "sixth"
    assert data["in_tolerance"] is True
    assert data["confirmed"] is False


def test_cleared_listeners_are_not_called(config, clock):
    tuner = Tuner(config, clock=clock)
    confirmed = []
    tuner.events.on_string_confirmed(lambda target, status: confirmed.append(target.label))
    # Registering the same callback twice still calls it once
    tuner.events.on_reset(confirmed.clear)
    tuner.events.on_reset(confirmed.clear)

    run_ticks(tuner, sine_frame(82.41), 16, clock)
    assert confirmed == ["sixth"]

    tuner.events.clear()
    tuner.reset()
    assert confirmed == ["sixth"]
    run_ticks(tuner, sine_frame(82.41), 16, clock)
    assert confirmed == ["sixth"]
