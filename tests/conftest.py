"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chip8jax import create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state in modern mode."""
    return create_state(modern_mode=True)


@pytest.fixture
def legacy_state():
    """Provide a fresh state in legacy mode."""
    return create_state(modern_mode=False)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def words_to_bytes(words):
    """Encode 16-bit instruction words big-endian."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def load_words(state, words, address=None):
    """Helper to place instruction words in memory (at 0x200 by default)."""
    if address is None:
        return load_program(state, words_to_bytes(words))
    return setup_sprite_in_memory(state, address, list(words_to_bytes(words)))
