"""CHIP-8 delay and sound timers."""

import jax
import jax.numpy as jnp
from chip8jax.state import EmulatorState


def _countdown(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


@jax.jit
def tick(state: EmulatorState) -> EmulatorState:
    """Decrement both timers by one, stopping at zero.

    Call this at 60 Hz regardless of how many instructions run in between.
    """
    return state.replace(
        delay_timer=_countdown(state.delay_timer),
        sound_timer=_countdown(state.sound_timer),
    )
