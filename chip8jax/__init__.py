"""CHIP-8 interpreter package."""

from chip8jax.constants import *
from chip8jax.errors import (
    ErrorCode, Chip8Error, AddressOutOfRangeError, StackError, StackOverflowError,
    StackUnderflowError, UnknownInstructionError, ProgramTooLargeError, InvalidKeyError,
    raise_for_error,
)
from chip8jax.state import EmulatorState, StackState, create_state, clear_error
from chip8jax.memory import read_byte, write_byte, write_bytes, load_program, load_font
from chip8jax.decode import Op, DecodedInstruction, decode
from chip8jax.emulator import execute, fetch, cycle, step, run, run_n_instructions
from chip8jax.timers import tick
from chip8jax.peripherals import (
    press_key, release_key, set_keypad, pressed_keys, display_frame, sound_active,
    needs_redraw, acknowledge_draw,
)
from chip8jax.runner import Chip8Runner, run_frame

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "clear_error",
    "read_byte",
    "write_byte",
    "write_bytes",
    "load_program",
    "load_font",
    "Op",
    "DecodedInstruction",
    "decode",
    "fetch",
    "execute",
    "cycle",
    "step",
    "run",
    "run_n_instructions",
    "tick",
    "press_key",
    "release_key",
    "set_keypad",
    "pressed_keys",
    "display_frame",
    "sound_active",
    "needs_redraw",
    "acknowledge_draw",
    "Chip8Runner",
    "run_frame",
    "ErrorCode",
    "Chip8Error",
    "AddressOutOfRangeError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownInstructionError",
    "ProgramTooLargeError",
    "InvalidKeyError",
    "raise_for_error",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
