"""Tests for system instructions (0xxx) and the subroutine stack."""

import jax.numpy as jnp
import pytest
from chip8jax import (
    execute, step, ErrorCode, StackOverflowError, StackUnderflowError, STACK_SIZE,
)
from conftest import load_words


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.draw_flag


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_call_pushes_address_after_call(fresh_state):
    """A stepped CALL returns to the instruction following it."""
    state = load_words(fresh_state, [0x2300])
    state = load_words(state, [0x00EE], address=0x300)

    state = step(state)
    assert state.pc == 0x300
    state = step(state)
    assert state.pc == 0x202


def test_system_call_is_ignored(fresh_state):
    """0NNN machine code routines are skipped."""
    state = load_words(fresh_state, [0x0123])
    state = step(state)
    assert state.pc == 0x202
    assert state.error == ErrorCode.NONE


class TestStackLimits:
    """Stack depth is bounded at 16 return addresses."""

    def test_sixteen_calls_fit(self, fresh_state):
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)
        assert state.error == ErrorCode.NONE
        assert state.stack.pointer == STACK_SIZE

    def test_seventeenth_call_overflows(self, fresh_state):
        state = fresh_state
        for _ in range(STACK_SIZE):
            state = execute(state, 0x2300)

        state = execute(state, 0x2300)
        assert state.error == ErrorCode.STACK_OVERFLOW

    def test_return_on_empty_stack_underflows(self, fresh_state):
        state = execute(fresh_state, 0x00EE)
        assert state.error == ErrorCode.STACK_UNDERFLOW

    def test_recursive_call_raises_overflow(self, fresh_state):
        """A program calling itself fails on the 17th call."""
        state = load_words(fresh_state, [0x2200])  # CALL 0x200
        for _ in range(STACK_SIZE):
            state = step(state)

        with pytest.raises(StackOverflowError):
            step(state)

    def test_nested_calls_then_extra_return_raises_underflow(self, fresh_state):
        """16 calls, 16 returns, then one more return."""
        # Main: CALL sub0; RET (the extra one)
        state = load_words(fresh_state, [0x2300, 0x00EE])
        # sub_k at 0x300 + 4k: CALL sub_{k+1}; RET. The last one only returns.
        for k in range(STACK_SIZE - 1):
            address = 0x300 + 4 * k
            state = load_words(state, [0x2000 | (address + 4), 0x00EE], address=address)
        state = load_words(state, [0x00EE], address=0x300 + 4 * (STACK_SIZE - 1))

        for _ in range(2 * STACK_SIZE):
            state = step(state)
        assert state.pc == 0x202
        assert state.stack.pointer == 0

        with pytest.raises(StackUnderflowError):
            step(state)
