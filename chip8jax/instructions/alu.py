"""CHIP-8 ALU operations (8xxx).

Each ``alu_*`` function maps ``(vx, vy)`` to ``(result, flag)``; ``flag`` is
``None`` when the operation leaves VF alone. Values arrive as int32 so sums and
differences never wrap before the flag is computed.
"""

import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    total = vx + vy
    return total & 0xFF, total > 0xFF


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = no borrow."""
    return (vx - vy) & 0xFF, vx >= vy


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = no borrow."""
    return (vy - vx) & 0xFF, vy >= vx


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return vx >> 1, vx & 1


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return (vx << 1) & 0xFF, (vx >> 7) & 1


def make_alu_instruction(alu_fn, shift: bool = False):
    """Wrap an ALU function into an instruction handler.

    VF is written after the result, so an operation targeting VF keeps the flag.
    Shifts read VY instead of VX in legacy mode.
    """
    def alu_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        vx = state.V[instruction.x].astype(jnp.int32)
        vy = state.V[instruction.y].astype(jnp.int32)
        if shift and not state.modern_mode:
            vx = vy
        result, flag = alu_fn(vx, vy)
        state = state.set_register(instruction.x, result)
        if flag is None:
            return state
        return state.set_flag(flag)
    alu_instruction.__doc__ = alu_fn.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
execute_alu_shift_right = make_alu_instruction(alu_shift_right, shift=True)
execute_alu_shift_left = make_alu_instruction(alu_shift_left, shift=True)
