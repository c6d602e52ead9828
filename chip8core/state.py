"""CHIP-8 emulator state structures."""

import enum
from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8core.constants import FONT_START, FONT_DATA, MEMORY_SIZE, NUM_REGISTERS, PROGRAM_START, STACK_SIZE
from chip8core.devices import FrameBuffer, Keypad
from chip8core.timers import TimerRegisters


class RunMode(enum.Enum):
    """Operating state of the processor."""
    RUNNING = "running"
    WAITING_FOR_KEY = "waiting_for_key"


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Registers, memory and stack are immutable arrays replaced on every
    instruction. The display, keypad and timers are shared device objects
    carried by reference.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    stack: StackState = field(default_factory=StackState)
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    mode: RunMode = field(pytree_node=False, default=RunMode.RUNNING)
    key_register: int = field(pytree_node=False, default=0)
    display: Optional[FrameBuffer] = field(pytree_node=False, default=None)
    keypad: Optional[Keypad] = field(pytree_node=False, default=None)
    timers: Optional[TimerRegisters] = field(pytree_node=False, default=None)

    @property
    def waiting_for_key(self) -> bool:
        return self.mode is RunMode.WAITING_FOR_KEY

    @property
    def delay_timer(self) -> int:
        return self.timers.delay

    @property
    def sound_timer(self) -> int:
        return self.timers.sound


def create_state(
    rng: Optional[jax.random.PRNGKey] = None,
    display: Optional[FrameBuffer] = None,
    keypad: Optional[Keypad] = None,
    timers: Optional[TimerRegisters] = None,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(
        rng,
        display=FrameBuffer() if display is None else display,
        keypad=Keypad() if keypad is None else keypad,
        timers=TimerRegisters() if timers is None else timers,
    )
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
