"""CHIP-8 memory access and program loading."""

import jax.numpy as jnp
import numpy as np

from chip8jax.constants import MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE, FONT_START, FONT_DATA
from chip8jax.errors import AddressOutOfRangeError, ProgramTooLargeError


def in_range(address, count=1):
    """Whether `count` bytes starting at `address` lie inside memory.

    Works on Python ints and traced values alike.
    """
    address = jnp.asarray(address, dtype=jnp.int32)
    return (address >= 0) & (address + count <= MEMORY_SIZE)


def _check_address(address: int, count: int = 1) -> None:
    if not (0 <= address and address + count <= MEMORY_SIZE):
        msg = f"Address 0x{address:04X} out of memory range."
        raise AddressOutOfRangeError(msg)


def read_byte(state, address: int) -> int:
    """Return the byte at `address`.

    Raises:
        AddressOutOfRangeError: If address is outside of memory.
    """
    _check_address(address)
    return int(state.memory[address])


def write_byte(state, address: int, value: int):
    """Write the low byte of `value` to `address`.

    Raises:
        AddressOutOfRangeError: If address is outside of memory.
    """
    _check_address(address)
    return state.replace(memory=state.memory.at[address].set(jnp.uint8(value & 0xFF)))


def write_bytes(state, start_address: int, data):
    """Write a sequence of bytes starting at `start_address`.

    Raises:
        AddressOutOfRangeError: If the sequence does not fit in memory.
    """
    data = np.frombuffer(bytes(data), dtype=np.uint8)
    _check_address(start_address, max(len(data), 1))
    new_memory = state.memory.at[start_address:start_address + len(data)].set(jnp.asarray(data))
    return state.replace(memory=new_memory)


def load_font(state, font=FONT_DATA):
    """Write the built-in sprite font at FONT_START."""
    font = jnp.asarray(font, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(font)].set(font))


def load_program(state, program):
    """Load a raw program image into memory starting at 0x200.

    Raises:
        ProgramTooLargeError: If the image does not fit in the 3584 bytes above the load offset.
    """
    program = bytes(program)
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(
            f"Program is {len(program)} bytes, at most {MAX_PROGRAM_SIZE} fit in memory."
        )
    return write_bytes(state, PROGRAM_START, program)
