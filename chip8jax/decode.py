"""CHIP-8 instruction decoding."""

from enum import IntEnum

import jax.numpy as jnp
from chex import dataclass


class Op(IntEnum):
    """Instruction variants, in dispatch order."""
    CLEAR_SCREEN = 0
    RETURN = 1
    SYSTEM = 2
    JUMP = 3
    CALL = 4
    SKIP_EQ_IMM = 5
    SKIP_NE_IMM = 6
    SKIP_EQ_REG = 7
    SET_IMM = 8
    ADD_IMM = 9
    SET_REG = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD_REG = 14
    SUB = 15
    SHR = 16
    SUBN = 17
    SHL = 18
    SKIP_NE_REG = 19
    SET_INDEX = 20
    JUMP_OFFSET = 21
    RANDOM = 22
    DRAW = 23
    SKIP_KEY = 24
    SKIP_NOT_KEY = 25
    GET_DELAY = 26
    WAIT_KEY = 27
    SET_DELAY = 28
    SET_SOUND = 29
    ADD_INDEX = 30
    FONT = 31
    BCD = 32
    STORE = 33
    LOAD = 34
    UNKNOWN = 35


# (mask, pattern, op) rows; the first matching row wins, so exact words come
# before the 0NNN catch-all.
INSTRUCTION_TABLE = (
    (0xFFFF, 0x00E0, Op.CLEAR_SCREEN),
    (0xFFFF, 0x00EE, Op.RETURN),
    (0xF000, 0x0000, Op.SYSTEM),
    (0xF000, 0x1000, Op.JUMP),
    (0xF000, 0x2000, Op.CALL),
    (0xF000, 0x3000, Op.SKIP_EQ_IMM),
    (0xF000, 0x4000, Op.SKIP_NE_IMM),
    (0xF00F, 0x5000, Op.SKIP_EQ_REG),
    (0xF000, 0x6000, Op.SET_IMM),
    (0xF000, 0x7000, Op.ADD_IMM),
    (0xF00F, 0x8000, Op.SET_REG),
    (0xF00F, 0x8001, Op.OR),
    (0xF00F, 0x8002, Op.AND),
    (0xF00F, 0x8003, Op.XOR),
    (0xF00F, 0x8004, Op.ADD_REG),
    (0xF00F, 0x8005, Op.SUB),
    (0xF00F, 0x8006, Op.SHR),
    (0xF00F, 0x8007, Op.SUBN),
    (0xF00F, 0x800E, Op.SHL),
    (0xF00F, 0x9000, Op.SKIP_NE_REG),
    (0xF000, 0xA000, Op.SET_INDEX),
    (0xF000, 0xB000, Op.JUMP_OFFSET),
    (0xF000, 0xC000, Op.RANDOM),
    (0xF000, 0xD000, Op.DRAW),
    (0xF0FF, 0xE09E, Op.SKIP_KEY),
    (0xF0FF, 0xE0A1, Op.SKIP_NOT_KEY),
    (0xF0FF, 0xF007, Op.GET_DELAY),
    (0xF0FF, 0xF00A, Op.WAIT_KEY),
    (0xF0FF, 0xF015, Op.SET_DELAY),
    (0xF0FF, 0xF018, Op.SET_SOUND),
    (0xF0FF, 0xF01E, Op.ADD_INDEX),
    (0xF0FF, 0xF029, Op.FONT),
    (0xF0FF, 0xF033, Op.BCD),
    (0xF0FF, 0xF055, Op.STORE),
    (0xF0FF, 0xF065, Op.LOAD),
)

_MASKS = jnp.array([row[0] for row in INSTRUCTION_TABLE], dtype=jnp.uint16)
_PATTERNS = jnp.array([row[1] for row in INSTRUCTION_TABLE], dtype=jnp.uint16)
_OPS = jnp.array([row[2] for row in INSTRUCTION_TABLE], dtype=jnp.int32)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: int      # Op tag
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def identify(instruction) -> jnp.ndarray:
    """Return the `Op` tag of a 16-bit instruction word."""
    word = jnp.asarray(instruction).astype(jnp.uint16)
    matches = (word & _MASKS) == _PATTERNS
    return jnp.where(jnp.any(matches), _OPS[jnp.argmax(matches)], jnp.int32(Op.UNKNOWN))


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into its tag and operand fields."""
    instruction = jnp.asarray(instruction).astype(jnp.uint16)
    return DecodedInstruction(
        raw=instruction,
        op=identify(instruction),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
