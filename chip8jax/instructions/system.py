"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction
from chip8jax.errors import ErrorCode
from chip8jax.stack import pop, is_empty


def no_op(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Machine code routine, ignored."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(
        display=jnp.zeros_like(state.display),
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    state = state.fail_if(is_empty(state.stack), ErrorCode.STACK_UNDERFLOW)
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address.astype(jnp.uint16))


def execute_unknown(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Any word that matches no instruction."""
    return state.fail_if(True, ErrorCode.UNKNOWN_INSTRUCTION)
