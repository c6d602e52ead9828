"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8core.state import EmulatorState, RunMode
from chip8core.decode import DecodedInstruction
from chip8core.constants import ADDRESS_MASK, FONT_CHAR_SIZE, FONT_START
from chip8core.instructions import require_range


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.timers.delay))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    state.timers.set_delay(int(state.V[instruction.x]))
    return state


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    state.timers.set_sound(int(state.V[instruction.x]))
    return state


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I, wrapping at 12 bits. VF is not touched."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & ADDRESS_MASK
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Suspend until the next key press, which lands in VX.

    Presses queued before this instruction do not count.
    """
    state.keypad.clear_events()
    return state.replace(mode=RunMode.WAITING_FOR_KEY, key_register=instruction.x)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for the low nibble of VX."""
    digit = int(state.V[instruction.x]) & 0xF
    return state.replace(I=jnp.astype(FONT_START + digit * FONT_CHAR_SIZE, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    index = int(state.I)
    require_range(index, 3)

    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[index:index + 3].set(digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I.

    I is read once and set to I + X + 1 after the copy.
    """
    index = int(state.I)
    count = instruction.x + 1
    require_range(index, count)

    new_memory = state.memory.at[index:index + count].set(state.V[:count])
    return state.replace(memory=new_memory, I=jnp.astype((index + count) & ADDRESS_MASK, jnp.uint16))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I.

    Same I post-increment as FX55.
    """
    index = int(state.I)
    count = instruction.x + 1
    require_range(index, count)

    new_V = state.V.at[:count].set(state.memory[index:index + count])
    return state.replace(V=new_V, I=jnp.astype((index + count) & ADDRESS_MASK, jnp.uint16))
