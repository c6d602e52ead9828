"""CHIP-8 interpreter errors.

Every error carries the process exit code the command line reports it with.
Handlers raise without knowing where they run; the interpreter attaches the
address and word of the failing instruction with :meth:`Chip8Error.locate`.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base class for all interpreter faults."""

    exit_code = 1

    def __init__(self, message: str, pc: Optional[int] = None, word: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.pc = pc
        self.word = word

    def locate(self, pc: int, word: Optional[int] = None) -> "Chip8Error":
        """Record the failing instruction unless it is already known."""
        if self.pc is None:
            self.pc = pc
        if self.word is None:
            self.word = word
        return self

    def describe(self) -> str:
        """Human readable diagnostic naming the failing instruction."""
        parts = [self.message]
        if self.pc is not None:
            parts.append(f"at 0x{self.pc:04X}")
        if self.word is not None:
            parts.append(f"(opcode 0x{self.word:04X})")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.describe()


class LoadError(Chip8Error):
    """ROM file missing, unreadable, empty or too large."""

    exit_code = 3


class UnimplementedOpcode(Chip8Error):
    """Instruction word that decodes to no known operation."""

    exit_code = 4

    def __init__(self, word: int, pc: Optional[int] = None):
        super().__init__("unimplemented opcode", pc=pc, word=word)


class StackError(Chip8Error):
    exit_code = 5


class StackOverflow(StackError):
    """CALL with all 16 stack slots in use."""

    def __init__(self, pc: Optional[int] = None, word: Optional[int] = None):
        super().__init__("stack overflow", pc=pc, word=word)


class StackUnderflow(StackError):
    """RET with an empty stack."""

    def __init__(self, pc: Optional[int] = None, word: Optional[int] = None):
        super().__init__("stack underflow", pc=pc, word=word)


class MemoryOutOfBounds(Chip8Error):
    """Access outside the 4 KiB address space."""

    exit_code = 6

    def __init__(self, target: int, pc: Optional[int] = None, word: Optional[int] = None):
        super().__init__(f"memory access out of bounds (0x{target:X})", pc=pc, word=word)
        self.target = target
