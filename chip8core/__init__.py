"""CHIP-8 interpreter package."""

from chip8core.state import EmulatorState, RunMode, create_state
from chip8core.emulator import execute, fetch, cycle, load_rom, load_bytes, resume_with_key
from chip8core.decode import DecodedInstruction, Op, decode, disassemble
from chip8core.devices import Buzzer, FrameBuffer, Keypad
from chip8core.timers import TimerClock, TimerRegisters
from chip8core.errors import (
    Chip8Error, LoadError, UnimplementedOpcode, StackError, StackOverflow,
    StackUnderflow, MemoryOutOfBounds,
)
from chip8core.interpreter import HaltReason, Interpreter, InterpreterConfig, RunResult
from chip8core.constants import *

__all__ = [
    "EmulatorState",
    "RunMode",
    "create_state",
    "fetch",
    "execute",
    "cycle",
    "load_rom",
    "load_bytes",
    "resume_with_key",
    "DecodedInstruction",
    "Op",
    "decode",
    "disassemble",
    "Buzzer",
    "FrameBuffer",
    "Keypad",
    "TimerClock",
    "TimerRegisters",
    "Chip8Error",
    "LoadError",
    "UnimplementedOpcode",
    "StackError",
    "StackOverflow",
    "StackUnderflow",
    "MemoryOutOfBounds",
    "HaltReason",
    "Interpreter",
    "InterpreterConfig",
    "RunResult",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
