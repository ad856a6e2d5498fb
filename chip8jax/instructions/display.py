"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction
from chip8jax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE
from chip8jax.errors import ErrorCode
from chip8jax.memory import in_range

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def sprite_mask(memory: jnp.ndarray, index: jnp.ndarray, x, y, height) -> jnp.ndarray:
    """Boolean screen-sized mask of the pixels a sprite covers.

    Rows come from ``memory[index:index + height]``, most significant bit
    leftmost. Coordinates wrap around both screen edges.
    """
    sprite_x = jnp.asarray(x).astype(jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.asarray(y).astype(jnp.int32) % SCREEN_HEIGHT

    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < 8) & (row_offset < height)

    addresses = jnp.clip(jnp.asarray(index).astype(jnp.int32) + row_offset, 0, MEMORY_SIZE - 1)
    sprite_bytes = memory[addresses].astype(jnp.int32)
    bits = (sprite_bytes >> jnp.clip(7 - col_offset, 0, 7)) & 1
    return (bits == 1) & in_sprite


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    height = jnp.asarray(instruction.n).astype(jnp.int32)
    state = state.fail_if(~in_range(state.I, height), ErrorCode.ADDRESS_OUT_OF_RANGE)

    sprite = sprite_mask(state.memory, state.I, state.V[instruction.x], state.V[instruction.y], height)
    collision = jnp.any(state.display & sprite)

    state = state.replace(
        display=state.display ^ sprite,
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )
    return state.set_flag(collision)
