"""Tests for the delay and sound timers."""

import pytest
from chip8jax import tick


def with_timers(state, delay, sound):
    return state.replace(
        delay_timer=state.delay_timer + delay,
        sound_timer=state.sound_timer + sound,
    )


def test_tick_decrements_both(fresh_state):
    state = tick(with_timers(fresh_state, 5, 3))
    assert state.delay_timer == 4
    assert state.sound_timer == 2


def test_tick_at_zero_stays_zero(fresh_state):
    state = tick(fresh_state)
    assert state.delay_timer == 0
    assert state.sound_timer == 0


@pytest.mark.parametrize("value,ticks", [(1, 1), (10, 10), (10, 25), (255, 300)])
def test_tick_never_wraps(fresh_state, value, ticks):
    state = with_timers(fresh_state, value, value)
    for _ in range(ticks):
        state = tick(state)
    assert state.delay_timer == 0
    assert state.sound_timer == 0


def test_timers_independent(fresh_state):
    state = with_timers(fresh_state, 2, 0)
    state = tick(tick(tick(state)))
    assert state.delay_timer == 0
    assert state.sound_timer == 0


def test_tick_does_not_touch_cpu(fresh_state):
    state = tick(with_timers(fresh_state, 1, 1))
    assert state.pc == fresh_state.pc
