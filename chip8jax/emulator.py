"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import Op, decode
from chip8jax.errors import ErrorCode, raise_for_error
from chip8jax.memory import in_range
from chip8jax.instructions.system import no_op, execute_clear_screen, execute_return, execute_unknown
from chip8jax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8jax.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left
)
from chip8jax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8jax.instructions.display import execute_display
from chip8jax.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

HANDLERS = {
    Op.CLEAR_SCREEN: execute_clear_screen,
    Op.RETURN: execute_return,
    Op.SYSTEM: no_op,
    Op.JUMP: execute_jump,
    Op.CALL: execute_call,
    Op.SKIP_EQ_IMM: execute_skip_if_equal_immediate,
    Op.SKIP_NE_IMM: execute_skip_if_not_equal_immediate,
    Op.SKIP_EQ_REG: execute_skip_if_equal_register,
    Op.SET_IMM: execute_set,
    Op.ADD_IMM: execute_add,
    Op.SET_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_alu_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_alu_shift_left,
    Op.SKIP_NE_REG: execute_skip_if_not_equal_register,
    Op.SET_INDEX: execute_set_index,
    Op.JUMP_OFFSET: execute_jump_with_offset,
    Op.RANDOM: execute_random,
    Op.DRAW: execute_display,
    Op.SKIP_KEY: execute_skip_if_key,
    Op.SKIP_NOT_KEY: execute_skip_if_not_key,
    Op.GET_DELAY: execute_get_delay_timer,
    Op.WAIT_KEY: execute_wait_for_key,
    Op.SET_DELAY: execute_set_delay_timer,
    Op.SET_SOUND: execute_set_sound_timer,
    Op.ADD_INDEX: execute_add_to_index,
    Op.FONT: execute_font_character,
    Op.BCD: execute_bcd_conversion,
    Op.STORE: execute_store_registers,
    Op.LOAD: execute_load_registers,
    Op.UNKNOWN: execute_unknown,
}

assert set(HANDLERS) == set(Op), "every instruction variant needs a handler"

_BRANCHES = [HANDLERS[op] for op in sorted(Op)]


@jax.jit
def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The program counter is expected to already point past the instruction, as
    left by `fetch`. Failures are recorded in ``state.error``.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.op, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory (big-endian) and advance the program counter."""
    pc = state.pc.astype(jnp.int32)
    state = state.fail_if(~in_range(pc, 2), ErrorCode.ADDRESS_OUT_OF_RANGE)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=(state.pc + 2).astype(jnp.uint16)), instruction


def cycle(state: EmulatorState) -> EmulatorState:
    """Fetch and execute one instruction.

    A failing instruction leaves no partial effects: the result is the state
    from before the fetch with ``error`` set. A state that already carries an
    error is returned unchanged.
    """
    def _run(state):
        fetched, instruction = fetch(state)
        executed = jax.lax.cond(
            fetched.error == ErrorCode.NONE,
            lambda s: execute(s, instruction),
            lambda s: s,
            fetched
        )
        return jax.lax.cond(
            executed.error == ErrorCode.NONE,
            lambda: executed,
            lambda: state.replace(error=executed.error)
        )

    return jax.lax.cond(state.error == ErrorCode.NONE, _run, lambda s: s, state)


def run_instruction(state, _):
    state = cycle(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_n_instructions(state: EmulatorState, n: int) -> EmulatorState:
    """Run ``n`` fetch/execute cycles without raising."""
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


_jit_cycle = jax.jit(cycle)


def step(state: EmulatorState) -> EmulatorState:
    """Execute exactly one instruction.

    Raises:
        Chip8Error: The matching subclass if the instruction failed.
    """
    state = _jit_cycle(state)
    raise_for_error(state)
    return state


def run(state: EmulatorState, num_instructions: int) -> EmulatorState:
    """Execute ``num_instructions`` instructions, stopping at the first failure.

    Raises:
        Chip8Error: The matching subclass if an instruction failed.
    """
    state = run_n_instructions(state, num_instructions)
    raise_for_error(state)
    return state
