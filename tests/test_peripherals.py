"""Tests for host-facing keypad and display access."""

import numpy as np
import pytest
from chip8jax import (
    press_key, release_key, set_keypad, pressed_keys, display_frame, sound_active,
    needs_redraw, acknowledge_draw, execute, InvalidKeyError, SCREEN_WIDTH, SCREEN_HEIGHT,
)


class TestKeypad:

    def test_press_and_release(self, fresh_state):
        state = press_key(fresh_state, 0xA)
        assert state.keypad[0xA]
        assert pressed_keys(state) == [0xA]

        state = release_key(state, 0xA)
        assert not state.keypad[0xA]
        assert pressed_keys(state) == []

    def test_set_keypad_wholesale(self, fresh_state):
        keys = [False] * 16
        keys[1] = keys[15] = True
        state = set_keypad(fresh_state, keys)
        assert pressed_keys(state) == [1, 15]

    @pytest.mark.parametrize("key", [-1, 16, 255])
    def test_invalid_key(self, fresh_state, key):
        with pytest.raises(InvalidKeyError):
            press_key(fresh_state, key)
        with pytest.raises(InvalidKeyError):
            release_key(fresh_state, key)

    def test_set_keypad_wrong_length(self, fresh_state):
        with pytest.raises(InvalidKeyError):
            set_keypad(fresh_state, [True] * 15)


class TestDisplayAccess:

    def test_display_frame_is_row_major(self, fresh_state):
        state = fresh_state.replace(display=fresh_state.display.at[10, 3].set(True))
        frame = display_frame(state)
        assert isinstance(frame, np.ndarray)
        assert frame.shape == (SCREEN_HEIGHT, SCREEN_WIDTH)
        assert frame[3, 10]
        assert frame.sum() == 1

    def test_redraw_flag(self, fresh_state):
        assert not needs_redraw(fresh_state)
        state = execute(fresh_state, 0x00E0)
        assert needs_redraw(state)
        state = acknowledge_draw(state)
        assert not needs_redraw(state)

    def test_sound_active(self, fresh_state):
        assert not sound_active(fresh_state)
        state = execute(fresh_state, 0x6005)
        state = execute(state, 0xF018)
        assert sound_active(state)
