"""CHIP-8 instruction handlers, one module per instruction family.

Every handler takes ``(state, instruction)`` and returns the new state.
"""

from chip8core.constants import ADDRESS_MASK
from chip8core.errors import MemoryOutOfBounds


def require_range(start: int, length: int):
    """Raise if ``length`` bytes from ``start`` do not fit in memory."""
    if length > 0 and start + length - 1 > ADDRESS_MASK:
        raise MemoryOutOfBounds(start + length - 1)
