"""
Block/state conversions and hex formatting.

A block is loaded into the 4x4 state column by column:
  byte[0]  -> state[0][0]
  byte[1]  -> state[1][0]
  byte[2]  -> state[2][0]
  byte[3]  -> state[3][0]
  byte[4]  -> state[0][1]
  ...
  byte[15] -> state[3][3]
"""

from .errors import BlockSizeMismatch
from .interfaces import BLOCK_SIZE


def bytes_to_state(data: bytes) -> list[list[int]]:
    """
    Load a 16-byte block into a fresh 4x4 state.

    Raises:
        BlockSizeMismatch: If data is not exactly 16 bytes
    """
    if len(data) != BLOCK_SIZE:
        raise BlockSizeMismatch(f"Block must be {BLOCK_SIZE} bytes, got {len(data)}")

    return [[data[col * 4 + row] for col in range(4)] for row in range(4)]


def state_to_bytes(state: list[list[int]]) -> bytes:
    """Store a 4x4 state back into 16 bytes."""
    return bytes(state[row][col] for col in range(4) for row in range(4))


def hex_to_bytes(hex_str: str) -> bytes:
    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes) -> str:
    return data.hex()


def state_to_hex(state: list[list[int]]) -> str:
    """Convert state to hex string (via bytes)."""
    return bytes_to_hex(state_to_bytes(state))


def copy_state(state: list[list[int]]) -> list[list[int]]:
    return [row[:] for row in state]


def format_state_grid(state: list[list[int]]) -> str:
    """
    Format state as a readable 4x4 grid.

    Returns multi-line string like:
      2b 28 ab 09
      7e ae f7 cf
      15 d2 15 4f
      16 a6 88 3c
    """
    lines = []
    for row in range(4):
        row_hex = [f"{state[row][col]:02x}" for col in range(4)]
        lines.append("  " + " ".join(row_hex))
    return "\n".join(lines)


def format_state_line(state: list[list[int]]) -> str:
    """Format state as single-line hex string."""
    return state_to_hex(state)
