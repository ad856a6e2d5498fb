"""CHIP-8 register and index operations."""

import jax
import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return state.set_register(instruction.x, instruction.nn)


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, wrapping, VF untouched."""
    total = state.V[instruction.x].astype(jnp.int32) + jnp.asarray(instruction.nn).astype(jnp.int32)
    return state.set_register(instruction.x, total)


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.nnn).astype(jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.bits(subkey, (), jnp.uint8)
    state = state.replace(rng=key)
    return state.set_register(instruction.x, random_value & instruction.nn)
