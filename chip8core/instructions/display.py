"""CHIP-8 display operations."""

from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import FLAG_REGISTER
from chip8core.instructions import require_range


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    index = int(state.I)
    require_range(index, instruction.n)

    rows = state.memory[index:index + instruction.n].tolist()
    collision = state.display.blit(int(state.V[instruction.x]), int(state.V[instruction.y]), rows)

    return state.replace(V=state.V.at[FLAG_REGISTER].set(int(collision)))
