"""Console logging utilities for the CHIP-8 interpreter.

A small level-filtered console logger with optional colors and elapsed-time
stamps, plus an execution logger that knows how to describe program loads,
traced instructions, halts and faults.
"""

import sys
import time
from typing import Optional, TextIO

from chip8core.decode import decode


class ConsoleLogger:
    """Flexible console logger with level filtering and formatters."""

    def __init__(
        self,
        name: str = "chip8core",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream or sys.stdout
        self.error_stream = error_stream or sys.stderr
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }
        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            # Warnings and above go to the error stream
            stream = self.error_stream if self.level_order[level.upper()] >= 2 else self.stream
            print(formatted, file=stream, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)


class ExecutionLogger(ConsoleLogger):
    """Logger for the interpreter run loop."""

    def log_load(self, source: str, size: int, base: int):
        self.info(f"Loaded {source} ({size} bytes at 0x{base:03X})")

    def log_instruction(self, address: int, instruction: int):
        """Trace one instruction; formatting is skipped unless DEBUG is on."""
        if self._should_log("DEBUG"):
            self.debug(f"0x{address:04X}  {instruction:04X}  {decode(instruction).mnemonic}")

    def log_halt(self, reason: str, instructions: int, elapsed: float):
        rate = instructions / elapsed if elapsed > 0 else 0.0
        self.info(f"Halted ({reason}) after {instructions:,} instructions in {elapsed:.2f}s ({rate:,.0f} Hz)")

    def log_fault(self, error: Exception):
        """Report a fatal interpreter error with the failing instruction."""
        describe = getattr(error, "describe", None)
        message = describe() if describe is not None else str(error)
        word = getattr(error, "word", None)
        if word is not None:
            message = f"{message}: {decode(word).mnemonic}"
        self.error(message)
