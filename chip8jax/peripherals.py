"""Host-facing keypad and display access.

The host writes the keypad and reads the display and the sound timer; nothing
else in the state is meant to be touched from outside the interpreter.
"""

from typing import Sequence

import jax.numpy as jnp
import numpy as np

from chip8jax.constants import NUM_KEYS
from chip8jax.errors import InvalidKeyError
from chip8jax.state import EmulatorState


def _check_key(key: int) -> None:
    if not 0 <= key < NUM_KEYS:
        raise InvalidKeyError(f"Key {key} is not on the keypad (expected 0-{NUM_KEYS - 1}).")


def press_key(state: EmulatorState, key: int) -> EmulatorState:
    """Mark ``key`` (0-15) as held."""
    _check_key(key)
    return state.replace(keypad=state.keypad.at[key].set(True))


def release_key(state: EmulatorState, key: int) -> EmulatorState:
    """Mark ``key`` (0-15) as released."""
    _check_key(key)
    return state.replace(keypad=state.keypad.at[key].set(False))


def set_keypad(state: EmulatorState, keys: Sequence[bool]) -> EmulatorState:
    """Overwrite the whole keypad with 16 held/released flags."""
    keys = np.asarray(keys, dtype=np.bool_)
    if keys.shape != (NUM_KEYS,):
        raise InvalidKeyError(f"Expected {NUM_KEYS} key flags, got shape {keys.shape}.")
    return state.replace(keypad=jnp.asarray(keys))


def pressed_keys(state: EmulatorState) -> list[int]:
    """Indices of the keys currently held."""
    return [int(k) for k in np.flatnonzero(np.asarray(state.keypad))]


def display_frame(state: EmulatorState) -> np.ndarray:
    """Snapshot of the display as a (height, width) boolean array, row-major."""
    return np.array(state.display, dtype=np.bool_).T


def sound_active(state: EmulatorState) -> bool:
    """Whether the host should be playing the tone."""
    return bool(state.sound_timer > 0)


def needs_redraw(state: EmulatorState) -> bool:
    """Whether the display changed since the host last acknowledged a draw."""
    return bool(state.draw_flag)


def acknowledge_draw(state: EmulatorState) -> EmulatorState:
    """Clear the redraw flag after rendering."""
    return state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))
