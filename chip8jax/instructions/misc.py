"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction
from chip8jax.constants import FONT_START, FONT_GLYPH_SIZE, NUM_KEYS, NUM_REGISTERS
from chip8jax.errors import ErrorCode
from chip8jax.memory import in_range


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.set_register(instruction.x, state.delay_timer)


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I, wrapping at 16 bits. VF = 1 if I ends up past 0xFFF."""
    new_i = (state.I.astype(jnp.int32) + state.V[instruction.x].astype(jnp.int32)) & 0xFFFF
    state = state.replace(I=new_i.astype(jnp.uint16))
    return state.set_flag(new_i > 0xFFF)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for a key press, store the key in VX.

    The first execution snapshots the keypad and rewinds the program counter.
    Later executions finish as soon as a key is held that was not held in the
    previous snapshot; otherwise they refresh the snapshot and rewind again.
    """
    newly_pressed = state.keypad & ~state.key_snapshot & state.awaiting_key

    def key_pressed_action(state):
        state = state.set_register(instruction.x, jnp.argmax(newly_pressed))
        return state.replace(
            awaiting_key=jnp.zeros((), dtype=jnp.bool_),
            key_snapshot=jnp.zeros(NUM_KEYS, dtype=jnp.bool_),
        )

    def wait_action(state):
        return state.replace(
            pc=(state.pc - 2).astype(jnp.uint16),
            awaiting_key=jnp.ones((), dtype=jnp.bool_),
            key_snapshot=state.keypad,
        )

    return jax.lax.cond(jnp.any(newly_pressed), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = state.V[instruction.x].astype(jnp.int32) & 0xF
    return state.replace(I=(FONT_START + digit * FONT_GLYPH_SIZE).astype(jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    state = state.fail_if(~in_range(state.I, 3), ErrorCode.ADDRESS_OUT_OF_RANGE)
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + state.I.astype(jnp.int32)
    new_memory = state.memory.at[indices].set(digits, mode="drop")
    return state.replace(memory=new_memory)


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Legacy FX55/FX65 leave I pointing past the last register transferred."""
    if state.modern_mode:
        return state
    new_i = (state.I.astype(jnp.int32) + jnp.asarray(instruction.x).astype(jnp.int32) + 1) & 0xFFFF
    return state.replace(I=new_i.astype(jnp.uint16))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = jnp.asarray(instruction.x).astype(jnp.int32) + 1
    state = state.fail_if(~in_range(state.I, count), ErrorCode.ADDRESS_OUT_OF_RANGE)

    register_mask = jnp.arange(NUM_REGISTERS) < count
    base_indices = state.I.astype(jnp.int32) + jnp.arange(NUM_REGISTERS)
    current_memory_values = state.memory[base_indices]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = state.memory.at[base_indices].set(new_memory_values, mode="drop")

    return _advance_index(state.replace(memory=new_memory), instruction)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = jnp.asarray(instruction.x).astype(jnp.int32) + 1
    state = state.fail_if(~in_range(state.I, count), ErrorCode.ADDRESS_OUT_OF_RANGE)

    register_mask = jnp.arange(NUM_REGISTERS) < count
    base_indices = state.I.astype(jnp.int32) + jnp.arange(NUM_REGISTERS)
    memory_values = state.memory[base_indices]
    new_V = jnp.where(register_mask, memory_values, state.V)

    return _advance_index(state.replace(V=new_V), instruction)
