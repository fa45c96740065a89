"""
AES key expansion.

The schedule is a tuple of 4-byte words. Round key r is the four words
schedule[4r .. 4r+3], one word per state column.
"""

from __future__ import annotations

import logging

from .errors import KeyLengthMismatch
from .galois import SBOX, RCON
from .interfaces import BLOCK_WORDS, KeySize

logger = logging.getLogger(__name__)


def rot_word(word: bytes) -> bytes:
    """Rotate a 4-byte word left by one byte."""
    return word[1:] + word[:1]


def sub_word(word: bytes) -> bytes:
    """Apply the S-box to every byte of a word."""
    return bytes(SBOX[b] for b in word)


def key_expansion(key: bytes, key_length: int, num_rounds: int) -> tuple[bytes, ...]:
    """
    Expand a cipher key into the full round-key schedule.

    Args:
        key: Raw cipher key (16 or 32 bytes)
        key_length: Key length in 4-byte words (4 or 8)
        num_rounds: Number of rounds (10 or 14)

    Returns:
        Tuple of 4 * (num_rounds + 1) words, each 4 bytes

    Raises:
        KeyLengthMismatch: If len(key) != 4 * key_length
    """
    if len(key) != 4 * key_length:
        raise KeyLengthMismatch(
            f"Key must be {4 * key_length} bytes for a {key_length * 32}-bit key, "
            f"got {len(key)}"
        )

    # First key_length words are the key itself
    w = [bytes(key[i:i + 4]) for i in range(0, len(key), 4)]

    for i in range(key_length, BLOCK_WORDS * (num_rounds + 1)):
        temp = w[i - 1]
        if i % key_length == 0:
            temp = sub_word(rot_word(temp))
            temp = bytes([temp[0] ^ RCON[i // key_length]]) + temp[1:]
        elif key_length > 6 and i % key_length == 4:
            temp = sub_word(temp)
        w.append(bytes(a ^ b for a, b in zip(w[i - key_length], temp)))

    logger.debug("Expanded %d-bit key into %d words", key_length * 32, len(w))
    return tuple(w)


def expand_key(key: bytes, key_size: KeySize) -> tuple[bytes, ...]:
    """Expand a key using the parameters of the given key size."""
    return key_expansion(key, key_size.key_length_words, key_size.num_rounds)


def round_key(schedule: tuple[bytes, ...], round_num: int) -> list[list[int]]:
    """
    Get the round key for one round as a 4x4 grid.

    grid[row][col] is byte `row` of schedule word `round_num * 4 + col`,
    matching the column-major state layout.
    """
    words = schedule[round_num * BLOCK_WORDS:(round_num + 1) * BLOCK_WORDS]
    if len(words) != BLOCK_WORDS:
        raise ValueError(
            f"Schedule of {len(schedule)} words has no round key {round_num}"
        )
    return [[words[col][row] for col in range(BLOCK_WORDS)] for row in range(4)]
