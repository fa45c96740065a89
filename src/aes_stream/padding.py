"""
Length padding and block splitting.

Padding always adds 1..16 bytes: all zero except the last, which holds the
pad length. A message that is already block-aligned gets a full extra
block. Only the last byte carries the length, so this is not PKCS#7 and
ciphertexts do not interoperate with PKCS#7 tooling.
"""

from __future__ import annotations

from .errors import CiphertextAlignmentError, InvalidPadding
from .interfaces import BLOCK_SIZE


def padding_length(message_length: int) -> int:
    """Number of padding bytes appended to a message of the given length."""
    return BLOCK_SIZE - message_length % BLOCK_SIZE


def pad(message: bytes) -> bytes:
    """
    Pad a message to a whole number of blocks.

    Args:
        message: Message of any length (including empty)

    Returns:
        Padded message, 1..16 bytes longer than the input
    """
    length = padding_length(len(message))
    return bytes(message) + bytes(length - 1) + bytes([length])


def unpad(block: bytes) -> bytes:
    """
    Strip padding from the final decrypted block.

    Args:
        block: Last plaintext block (or whole padded message)

    Returns:
        The block without its trailing padding; may be empty

    Raises:
        InvalidPadding: If the last byte is 0, exceeds 16, or exceeds the
            data length
    """
    if not block:
        raise InvalidPadding("Cannot strip padding from empty data")

    length = block[-1]
    if not 1 <= length <= BLOCK_SIZE or length > len(block):
        raise InvalidPadding(f"Invalid padding length {length}")
    return bytes(block[:-length])


def split_blocks(data: bytes) -> list[bytes]:
    """
    Split data into consecutive 16-byte blocks of data.

    Raises:
        CiphertextAlignmentError: If len(data) is not a multiple of 16
    """
    if len(data) % BLOCK_SIZE:
        raise CiphertextAlignmentError(
            f"Data length {len(data)} is not a multiple of {BLOCK_SIZE}"
        )
    return [bytes(data[offset:offset + BLOCK_SIZE]) for offset in range(0, len(data), BLOCK_SIZE)]
