"""CHIP-8 interpreter run loop.

``Interpreter`` owns one emulator state, its devices and the timer clock, and
runs instructions on the calling thread until the program faults, parks
itself in a jump-to-self loop, hits an instruction limit or ``stop()`` is
called from another thread.
"""

import enum
import os
import threading
import time
from typing import Optional

import jax
from chex import dataclass
from tqdm import tqdm

from chip8core.constants import INSTRUCTIONS_PER_SECOND, PROGRAM_START, TIMER_HZ
from chip8core.decode import Op, decode
from chip8core.devices import Buzzer, FrameBuffer, Keypad
from chip8core.emulator import execute, fetch, load_bytes, load_rom, resume_with_key
from chip8core.errors import Chip8Error, UnimplementedOpcode
from chip8core.logging import ExecutionLogger
from chip8core.state import EmulatorState, create_state
from chip8core.timers import TimerClock, TimerRegisters

UNKNOWN_OPCODE_POLICIES = ("halt", "skip")

# Jumps that can park the processor on its own address
SELF_JUMP_OPS = (Op.JP, Op.JP_V0)


class HaltReason(enum.Enum):
    STOPPED = "stopped"
    SELF_JUMP = "self_jump"
    INSTRUCTION_LIMIT = "instruction_limit"
    FAULT = "fault"


@dataclass(frozen=True)
class InterpreterConfig:
    """Interpreter settings.

    Attributes:
        load_address: Where programs are copied and execution starts
        instructions_per_second: CPU speed; 0 runs unthrottled
        timer_hz: Delay/sound timer rate
        on_unknown_opcode: "halt" stops the run loop, "skip" logs and continues
        halt_on_self_jump: Stop when an instruction jumps to its own address
        trace: Log every executed instruction
        seed: Seed for the RND instruction's PRNG key
        key_poll_interval: Seconds between stop checks while waiting for a key
    """
    load_address: int = PROGRAM_START
    instructions_per_second: float = INSTRUCTIONS_PER_SECOND
    timer_hz: float = TIMER_HZ
    on_unknown_opcode: str = "halt"
    halt_on_self_jump: bool = True
    trace: bool = False
    seed: int = 0
    key_poll_interval: float = 0.05

    def __post_init__(self):
        if self.on_unknown_opcode not in UNKNOWN_OPCODE_POLICIES:
            raise ValueError(
                f"Unknown opcode policy '{self.on_unknown_opcode}'. "
                f"Available: {list(UNKNOWN_OPCODE_POLICIES)}"
            )
        if self.instructions_per_second < 0:
            raise ValueError("instructions_per_second must be >= 0")


@dataclass(frozen=True)
class RunResult:
    """Outcome of ``Interpreter.run``."""
    reason: HaltReason
    instructions: int
    error: Optional[Chip8Error] = None

    @property
    def exit_code(self) -> int:
        return self.error.exit_code if self.error is not None else 0


class Interpreter:
    """Runs a CHIP-8 program against in-memory or caller-supplied devices."""

    def __init__(
        self,
        config: Optional[InterpreterConfig] = None,
        display: Optional[FrameBuffer] = None,
        keypad: Optional[Keypad] = None,
        buzzer: Optional[Buzzer] = None,
        logger: Optional[ExecutionLogger] = None,
    ):
        self.config = config or InterpreterConfig()
        self.logger = logger or ExecutionLogger(log_level="DEBUG" if self.config.trace else "INFO")
        self.display = display or FrameBuffer()
        self.keypad = keypad or Keypad()
        self.buzzer = buzzer or Buzzer(self.logger)
        self.timers = TimerRegisters(on_sound=self.buzzer.on_sound)
        self.clock = TimerClock(self.timers, self.config.timer_hz)
        self.state: EmulatorState = create_state(
            jax.random.PRNGKey(self.config.seed),
            display=self.display,
            keypad=self.keypad,
            timers=self.timers,
        )
        self.instructions = 0
        self._stop = threading.Event()

    def load(self, filename: str):
        """Load a ROM file at the configured address."""
        self.state = load_rom(self.state, filename, self.config.load_address)
        self.logger.log_load(filename, os.path.getsize(filename), self.config.load_address)

    def load_bytes(self, rom_data: bytes):
        self.state = load_bytes(self.state, rom_data, self.config.load_address)
        self.logger.log_load("program", len(rom_data), self.config.load_address)

    def step(self) -> bool:
        """Execute one instruction.

        While the processor waits for a key this polls the keypad for one
        ``key_poll_interval`` instead, and returns False if no key came.
        Errors are raised with the failing instruction's address attached.
        """
        state = self.state
        if state.waiting_for_key:
            key = self.keypad.wait_for_press(self.config.key_poll_interval)
            if key is None:
                return False
            self.state = resume_with_key(state, key)
            return True

        pc = int(state.pc)
        word = None
        try:
            state, word = fetch(state)
            self.logger.log_instruction(pc, word)
            state = execute(state, word)
        except UnimplementedOpcode as e:
            e.locate(pc)
            if self.config.on_unknown_opcode != "skip":
                raise
            self.logger.warning(f"Skipping {e.describe()}")
        except Chip8Error as e:
            e.locate(pc, word)
            raise

        self.state = state
        self.instructions += 1
        return True

    def run(self, max_instructions: Optional[int] = None, progress: bool = False) -> RunResult:
        """Run until halted; faults are returned in the result, not raised.

        A ``stop()`` issued before the call makes it return immediately.
        """
        reason = HaltReason.STOPPED
        error = None
        executed = 0

        ips = self.config.instructions_per_second
        period = 1.0 / ips if ips > 0 else 0.0
        start_time = time.perf_counter()
        next_at = start_time

        self.clock.start()
        bar = tqdm(total=max_instructions, disable=not progress, unit="instr", desc="CHIP-8")
        try:
            while not self._stop.is_set():
                if max_instructions is not None and executed >= max_instructions:
                    reason = HaltReason.INSTRUCTION_LIMIT
                    break

                pc = int(self.state.pc)
                was_waiting = self.state.waiting_for_key
                try:
                    self.step()
                except Chip8Error as e:
                    reason, error = HaltReason.FAULT, e
                    break

                if was_waiting:
                    next_at = time.perf_counter()
                    continue

                executed += 1
                bar.update(1)

                if self.config.halt_on_self_jump and self._jumped_to_itself(pc):
                    reason = HaltReason.SELF_JUMP
                    break

                if period:
                    next_at += period
                    delay = next_at - time.perf_counter()
                    if delay > 0:
                        self._stop.wait(delay)
                    elif delay < -1.0:
                        next_at = time.perf_counter()
        finally:
            bar.close()
            self.clock.stop()
            self._stop.clear()

        if error is not None:
            self.logger.log_fault(error)
        self.logger.log_halt(reason.value, executed, time.perf_counter() - start_time)
        return RunResult(reason=reason, instructions=executed, error=error)

    def _jumped_to_itself(self, pc: int) -> bool:
        """Whether the instruction at ``pc`` was a jump that left PC on ``pc``.

        CALL and RET to the same address also leave PC unchanged and do not
        count.
        """
        if int(self.state.pc) != pc:
            return False
        _, word = fetch(self.state)
        return decode(word).op in SELF_JUMP_OPS

    def stop(self):
        """Ask the run loop to return before the next instruction."""
        self._stop.set()
