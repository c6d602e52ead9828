"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chip8core import create_state, load_bytes, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Encode instruction words as a big-endian ROM image."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def load_program(state, *words, base=PROGRAM_START):
    """Helper to load instruction words at ``base``."""
    return load_bytes(state, program(*words), base)
