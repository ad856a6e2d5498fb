"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8jax.constants import STACK_SIZE
from chip8jax.state import StackState


def is_full(stack: StackState) -> jnp.ndarray:
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    return stack.pointer <= 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack.

    Callers check `is_full` first; a push onto a full stack leaves the data untouched.
    """
    new_data = stack.data.at[stack.pointer].set(jnp.asarray(address).astype(jnp.uint16), mode="drop")
    return stack.replace(data=new_data, pointer=jnp.minimum(stack.pointer + 1, STACK_SIZE))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack.

    Callers check `is_empty` first; popping an empty stack returns 0.
    """
    new_pointer = jnp.maximum(stack.pointer - 1, 0)
    popped_address = jnp.where(is_empty(stack), jnp.uint16(0), stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(jnp.uint16(0))
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
