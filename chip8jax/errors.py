"""CHIP-8 interpreter errors.

Compiled JAX code cannot raise, so instructions record failures as an
`ErrorCode` in `EmulatorState.error`. Host-side code turns a nonzero code into
one of the exceptions below with `raise_for_error`.

Exception hierarchy::

    Chip8Error
    ├── AddressOutOfRangeError (also IndexError)
    ├── StackError
    │   ├── StackOverflowError
    │   └── StackUnderflowError
    ├── UnknownInstructionError
    ├── ProgramTooLargeError (also ValueError)
    └── InvalidKeyError (also ValueError)
"""

from enum import IntEnum
from typing import Optional

from chip8jax.constants import MEMORY_SIZE


class ErrorCode(IntEnum):
    """Error status stored in the emulator state."""
    NONE = 0
    ADDRESS_OUT_OF_RANGE = 1
    STACK_OVERFLOW = 2
    STACK_UNDERFLOW = 3
    UNKNOWN_INSTRUCTION = 4


class Chip8Error(Exception):
    """Base class for every interpreter error.

    Attributes:
        pc: Address of the instruction that failed, if any
        opcode: The 16-bit instruction word that failed, if known
    """

    def __init__(self, message: str, pc: Optional[int] = None, opcode: Optional[int] = None):
        self.pc = pc
        self.opcode = opcode
        if pc is not None:
            location = f"pc=0x{pc:03X}"
            if opcode is not None:
                location += f" opcode=0x{opcode:04X}"
            message = f"{message} ({location})"
        super().__init__(message)


class AddressOutOfRangeError(Chip8Error, IndexError):
    """Memory access outside [0, 4095]."""


class StackError(Chip8Error):
    """Return-address stack misuse."""


class StackOverflowError(StackError):
    """Subroutine call with a full stack."""


class StackUnderflowError(StackError):
    """Return with an empty stack."""


class UnknownInstructionError(Chip8Error):
    """Instruction word that matches no known variant."""


class ProgramTooLargeError(Chip8Error, ValueError):
    """Program image does not fit between the load offset and the end of memory."""


class InvalidKeyError(Chip8Error, ValueError):
    """Keypad index outside 0-15."""


_ERRORS = {
    ErrorCode.ADDRESS_OUT_OF_RANGE: (AddressOutOfRangeError, "Memory access out of range"),
    ErrorCode.STACK_OVERFLOW: (StackOverflowError, "Stack overflow on subroutine call"),
    ErrorCode.STACK_UNDERFLOW: (StackUnderflowError, "Stack underflow on return"),
    ErrorCode.UNKNOWN_INSTRUCTION: (UnknownInstructionError, "Unknown instruction"),
}


def error_for_code(code: int, pc: Optional[int] = None, opcode: Optional[int] = None) -> Chip8Error:
    """Build the exception matching an error code."""
    exc_type, message = _ERRORS[ErrorCode(code)]
    return exc_type(message, pc=pc, opcode=opcode)


def raise_for_error(state) -> None:
    """Raise the exception recorded in `state.error`, if any.

    A failed instruction leaves the state exactly as it was before that
    instruction ran, so `state.pc` still points at the failing word.
    """
    code = int(state.error)
    if code == ErrorCode.NONE:
        return
    pc = int(state.pc)
    opcode = None
    if 0 <= pc < MEMORY_SIZE - 1:
        opcode = (int(state.memory[pc]) << 8) | int(state.memory[pc + 1])
    raise error_for_code(code, pc=pc, opcode=opcode)
