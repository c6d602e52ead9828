"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass


class Op(enum.Enum):
    """Every CHIP-8 instruction variant, valued by its assembly template."""
    SYS = "SYS {nnn}"
    CLS = "CLS"
    RET = "RET"
    JP = "JP {nnn}"
    CALL = "CALL {nnn}"
    SE_BYTE = "SE V{x}, {nn}"
    SNE_BYTE = "SNE V{x}, {nn}"
    SE_REG = "SE V{x}, V{y}"
    LD_BYTE = "LD V{x}, {nn}"
    ADD_BYTE = "ADD V{x}, {nn}"
    LD_REG = "LD V{x}, V{y}"
    OR = "OR V{x}, V{y}"
    AND = "AND V{x}, V{y}"
    XOR = "XOR V{x}, V{y}"
    ADD_REG = "ADD V{x}, V{y}"
    SUB = "SUB V{x}, V{y}"
    SHR = "SHR V{x}"
    SUBN = "SUBN V{x}, V{y}"
    SHL = "SHL V{x}"
    SNE_REG = "SNE V{x}, V{y}"
    LD_I = "LD I, {nnn}"
    JP_V0 = "JP V0, {nnn}"
    RND = "RND V{x}, {nn}"
    DRW = "DRW V{x}, V{y}, {n}"
    SKP = "SKP V{x}"
    SKNP = "SKNP V{x}"
    LD_VX_DT = "LD V{x}, DT"
    LD_VX_K = "LD V{x}, K"
    LD_DT_VX = "LD DT, V{x}"
    LD_ST_VX = "LD ST, V{x}"
    ADD_I = "ADD I, V{x}"
    LD_F = "LD F, V{x}"
    LD_B = "LD B, V{x}"
    LD_STORE = "LD [I], V{x}"
    LD_LOAD = "LD V{x}, [I]"
    UNKNOWN = "DW {raw}"


# Families that need no secondary key.
_PRIMARY = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x5: Op.SE_REG,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0x9: Op.SNE_REG,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM = {0x00E0: Op.CLS, 0x00EE: Op.RET}

_ALU = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.LD_B,
    0x55: Op.LD_STORE,
    0x65: Op.LD_LOAD,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    @property
    def mnemonic(self) -> str:
        return self.op.value.format(
            raw=f"0x{self.raw:04X}",
            x=f"{self.x:X}",
            y=f"{self.y:X}",
            n=self.n,
            nn=f"0x{self.nn:02X}",
            nnn=f"0x{self.nnn:03X}",
        )


def _resolve(opcode: int, instruction: int) -> Op:
    if opcode in _PRIMARY:
        return _PRIMARY[opcode]
    if opcode == 0x0:
        return _SYSTEM.get(instruction, Op.SYS)
    if opcode == 0x8:
        return _ALU.get(instruction & 0x000F, Op.UNKNOWN)
    if opcode == 0xE:
        return _KEY.get(instruction & 0x00FF, Op.UNKNOWN)
    return _MISC.get(instruction & 0x00FF, Op.UNKNOWN)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Never raises: words with no matching operation decode as ``Op.UNKNOWN``
    and are rejected at execution time.
    """
    instruction = int(instruction) & 0xFFFF
    opcode = (instruction & 0xF000) >> 12
    return DecodedInstruction(
        raw=instruction,
        op=_resolve(opcode, instruction),
        opcode=opcode,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


def disassemble(instruction: int) -> str:
    """Assembly text for a single instruction word."""
    return decode(instruction).mnemonic
