"""Main CHIP-8 emulator execution engine."""

import jax.numpy as jnp
from chip8core.state import EmulatorState, RunMode
from chip8core.decode import Op, decode
from chip8core.constants import MEMORY_SIZE, PROGRAM_START, NUM_KEYS
from chip8core.errors import LoadError, MemoryOutOfBounds, UnimplementedOpcode
from chip8core.instructions.system import no_op, execute_clear_screen, execute_return
from chip8core.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key
)
from chip8core.instructions.alu import execute_alu_operation
from chip8core.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8core.instructions.display import execute_display
from chip8core.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

SEMANTICS = {
    Op.SYS: no_op,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_alu_operation,
    Op.OR: execute_alu_operation,
    Op.AND: execute_alu_operation,
    Op.XOR: execute_alu_operation,
    Op.ADD_REG: execute_alu_operation,
    Op.SUB: execute_alu_operation,
    Op.SHR: execute_alu_operation,
    Op.SUBN: execute_alu_operation,
    Op.SHL: execute_alu_operation,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_not_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.LD_STORE: execute_store_registers,
    Op.LD_LOAD: execute_load_registers,
}


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Raises ``UnimplementedOpcode`` for words that decode to no operation.
    """
    decoded_instruction = decode(instruction)
    handler = SEMANTICS.get(decoded_instruction.op)
    if handler is None:
        raise UnimplementedOpcode(decoded_instruction.raw)
    return handler(state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> int:
    """Pack two bytes into a 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory and advance PC past it."""
    pc = int(state.pc)
    if pc + 1 >= MEMORY_SIZE:
        raise MemoryOutOfBounds(pc + 1, pc=pc)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def cycle(state: EmulatorState) -> EmulatorState:
    """Fetch and execute one instruction."""
    state, instruction = fetch(state)
    return execute(state, instruction)


def resume_with_key(state: EmulatorState, key: int) -> EmulatorState:
    """Complete a pending FX0A with the pressed key."""
    if not state.waiting_for_key:
        return state
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key must be in [0, {NUM_KEYS - 1}], got {key}")
    return state.replace(
        V=state.V.at[state.key_register].set(key),
        mode=RunMode.RUNNING,
    )


def load_bytes(state: EmulatorState, rom_data: bytes, base: int = PROGRAM_START) -> EmulatorState:
    """Copy a program into memory starting at ``base``."""
    if base < PROGRAM_START:
        raise LoadError(f"Load address 0x{base:03X} overlaps the reserved area below 0x{PROGRAM_START:03X}")
    if not rom_data:
        raise LoadError("ROM is empty")
    capacity = MEMORY_SIZE - base
    if len(rom_data) > capacity:
        raise LoadError(f"ROM is {len(rom_data)} bytes, only {capacity} fit at 0x{base:03X}")
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[base:base + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory, pc=jnp.astype(base, jnp.uint16))


def load_rom(state: EmulatorState, filename: str, base: int = PROGRAM_START) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise LoadError(f"Cannot read ROM {filename}: {e.strerror or e}") from e
    return load_bytes(state, rom_data, base)
