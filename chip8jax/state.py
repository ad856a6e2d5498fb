"""CHIP-8 emulator state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8jax.constants import (
    MEMORY_SIZE, PROGRAM_START, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)
from chip8jax.errors import ErrorCode
from chip8jax.memory import load_font


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _zeros((), jnp.int32)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is indexed ``[x, y]``. ``error`` holds an `ErrorCode`; once it is
    nonzero the emulator stops executing instructions until the host clears it.
    """
    rng: jax.Array
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = field(default_factory=lambda: jnp.array(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = _zeros((SCREEN_WIDTH, SCREEN_HEIGHT), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    awaiting_key: jnp.ndarray = _zeros((), jnp.bool_)
    key_snapshot: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    draw_flag: jnp.ndarray = _zeros((), jnp.bool_)
    error: jnp.ndarray = _zeros((), jnp.uint8)
    modern_mode: bool = field(pytree_node=False, default=True)

    def fail_if(self, condition, code: ErrorCode) -> "EmulatorState":
        """Record `code` when `condition` holds, keeping any earlier error."""
        flagged = condition & (self.error == ErrorCode.NONE)
        return self.replace(error=jnp.where(flagged, jnp.uint8(code), self.error).astype(jnp.uint8))

    def set_register(self, index, value) -> "EmulatorState":
        """Write the low byte of `value` to register VX."""
        byte = (jnp.asarray(value).astype(jnp.int32) & 0xFF).astype(jnp.uint8)
        return self.replace(V=self.V.at[index].set(byte))

    def set_flag(self, value) -> "EmulatorState":
        """Write VF."""
        return self.set_register(0xF, value)


def create_state(rng: Optional[jax.Array] = None, modern_mode: bool = True) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    return load_font(EmulatorState(rng, modern_mode=modern_mode))


def clear_error(state: EmulatorState) -> EmulatorState:
    """Clear a recorded error so execution can resume."""
    return state.replace(error=jnp.zeros((), dtype=jnp.uint8))
