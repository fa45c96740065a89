"""
Single-block AES transform engine.

Each round step takes a 4x4 state and returns a new one; no step mutates
the grid it receives.

Encryption:
- Round 0: AddRoundKey
- Rounds 1..Nr-1: SubBytes, ShiftRows, MixColumns, AddRoundKey
- Round Nr: SubBytes, ShiftRows, AddRoundKey (no MixColumns)

Decryption runs the inverse steps in reverse round order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .galois import SBOX, INV_SBOX, multiply, xtime
from .interfaces import BLOCK_WORDS
from .key_schedule import round_key
from .utils import bytes_to_state, state_to_bytes, copy_state

if TYPE_CHECKING:
    from .trace import TraceRecorder

State = list[list[int]]


def add_round_key(state: State, key_grid: State) -> State:
    """XOR state with a round key grid."""
    return [[state[row][col] ^ key_grid[row][col] for col in range(4)] for row in range(4)]


def sub_bytes(state: State) -> State:
    """Apply S-box to each byte."""
    return [[SBOX[b] for b in row] for row in state]


def inv_sub_bytes(state: State) -> State:
    """Apply inverse S-box to each byte."""
    return [[INV_SBOX[b] for b in row] for row in state]


def shift_rows(state: State) -> State:
    """Rotate row r left by r positions."""
    return [state[row][row:] + state[row][:row] for row in range(4)]


def inv_shift_rows(state: State) -> State:
    """Rotate row r right by r positions."""
    return [state[row][4 - row:] + state[row][:4 - row] for row in range(4)]


def mix_columns(state: State) -> State:
    """
    Mix each column with the fixed matrix [2 3 1 1] (rotated per row).

    Only multiplications by 1, 2 and 3 occur, so 2*a is taken from xtime
    and 3*a as xtime(a) ^ a.
    """
    result = [[0] * 4 for _ in range(4)]
    for col in range(4):
        a = [state[row][col] for row in range(4)]
        c = [xtime(x) for x in a]
        result[0][col] = c[0] ^ a[1] ^ c[1] ^ a[2] ^ a[3]
        result[1][col] = a[0] ^ c[1] ^ a[2] ^ c[2] ^ a[3]
        result[2][col] = a[0] ^ a[1] ^ c[2] ^ a[3] ^ c[3]
        result[3][col] = a[0] ^ c[0] ^ a[1] ^ a[2] ^ c[3]
    return result


def inv_mix_columns(state: State) -> State:
    """Mix each column with the inverse matrix [14 11 13 9] (rotated per row)."""
    result = [[0] * 4 for _ in range(4)]
    for col in range(4):
        a = [state[row][col] for row in range(4)]
        result[0][col] = multiply(0x0e, a[0]) ^ multiply(0x0b, a[1]) ^ multiply(0x0d, a[2]) ^ multiply(0x09, a[3])
        result[1][col] = multiply(0x09, a[0]) ^ multiply(0x0e, a[1]) ^ multiply(0x0b, a[2]) ^ multiply(0x0d, a[3])
        result[2][col] = multiply(0x0d, a[0]) ^ multiply(0x09, a[1]) ^ multiply(0x0e, a[2]) ^ multiply(0x0b, a[3])
        result[3][col] = multiply(0x0b, a[0]) ^ multiply(0x0d, a[1]) ^ multiply(0x09, a[2]) ^ multiply(0x0e, a[3])
    return result


def _check_schedule(schedule: tuple[bytes, ...], num_rounds: int) -> None:
    needed = BLOCK_WORDS * (num_rounds + 1)
    if len(schedule) < needed:
        raise ValueError(
            f"Schedule has {len(schedule)} words, {num_rounds} rounds need {needed}"
        )


def _record(tracer: TraceRecorder | None, round_num: int, operation: str, state: State) -> None:
    if tracer is not None:
        tracer.record(round=round_num, operation=operation, state=copy_state(state))


def cipher_block(
    block: bytes,
    schedule: tuple[bytes, ...],
    num_rounds: int,
    tracer: TraceRecorder | None = None,
) -> bytes:
    """
    Encrypt a single 16-byte block.

    Args:
        block: 16-byte plaintext block
        schedule: Expanded key schedule from key_expansion()
        num_rounds: 10 for 128-bit keys, 14 for 256-bit keys
        tracer: Optional recorder receiving the state after every step

    Returns:
        16-byte ciphertext block

    Raises:
        BlockSizeMismatch: If block is not 16 bytes
    """
    _check_schedule(schedule, num_rounds)
    state = bytes_to_state(block)
    _record(tracer, 0, "Input", state)

    state = add_round_key(state, round_key(schedule, 0))
    _record(tracer, 0, "AddRoundKey", state)

    for round_num in range(1, num_rounds):
        state = sub_bytes(state)
        _record(tracer, round_num, "SubBytes", state)
        state = shift_rows(state)
        _record(tracer, round_num, "ShiftRows", state)
        state = mix_columns(state)
        _record(tracer, round_num, "MixColumns", state)
        state = add_round_key(state, round_key(schedule, round_num))
        _record(tracer, round_num, "AddRoundKey", state)

    # Final round: no MixColumns
    state = sub_bytes(state)
    _record(tracer, num_rounds, "SubBytes", state)
    state = shift_rows(state)
    _record(tracer, num_rounds, "ShiftRows", state)
    state = add_round_key(state, round_key(schedule, num_rounds))
    _record(tracer, num_rounds, "AddRoundKey", state)

    return state_to_bytes(state)


def inverse_cipher_block(
    block: bytes,
    schedule: tuple[bytes, ...],
    num_rounds: int,
    tracer: TraceRecorder | None = None,
) -> bytes:
    """
    Decrypt a single 16-byte block.

    Args:
        block: 16-byte ciphertext block
        schedule: Expanded key schedule from key_expansion()
        num_rounds: 10 for 128-bit keys, 14 for 256-bit keys
        tracer: Optional recorder receiving the state after every step

    Returns:
        16-byte plaintext block

    Raises:
        BlockSizeMismatch: If block is not 16 bytes
    """
    _check_schedule(schedule, num_rounds)
    state = bytes_to_state(block)
    _record(tracer, num_rounds, "Input", state)

    state = add_round_key(state, round_key(schedule, num_rounds))
    _record(tracer, num_rounds, "AddRoundKey", state)

    for round_num in range(num_rounds - 1, 0, -1):
        state = inv_shift_rows(state)
        _record(tracer, round_num, "InvShiftRows", state)
        state = inv_sub_bytes(state)
        _record(tracer, round_num, "InvSubBytes", state)
        state = add_round_key(state, round_key(schedule, round_num))
        _record(tracer, round_num, "AddRoundKey", state)
        state = inv_mix_columns(state)
        _record(tracer, round_num, "InvMixColumns", state)

    state = inv_shift_rows(state)
    _record(tracer, 0, "InvShiftRows", state)
    state = inv_sub_bytes(state)
    _record(tracer, 0, "InvSubBytes", state)
    state = add_round_key(state, round_key(schedule, 0))
    _record(tracer, 0, "AddRoundKey", state)

    return state_to_bytes(state)
