"""
AES-128/256 block cipher for arbitrary-length byte streams.

Messages are padded, split into independent 16-byte blocks and run through
the cipher one block at a time under a single expanded key schedule.
"""

__version__ = "1.0.0"

# FIPS-197 Appendix C key and input (first 32 hex chars give the 128-bit key)
DEFAULT_KEY_HEX = "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
DEFAULT_BLOCK_HEX = "00112233445566778899aabbccddeeff"

from .errors import (
    AESStreamError,
    UnsupportedKeySize,
    KeyLengthMismatch,
    BlockSizeMismatch,
    CiphertextAlignmentError,
    InvalidPadding,
)
from .interfaces import BLOCK_SIZE, KEY_SIZES, CipherConfig, KeySize
from .galois import multiply
from .key_schedule import key_expansion
from .block import cipher_block, inverse_cipher_block
from .padding import pad, unpad
from .driver import BlockCipher, encrypt, decrypt

__all__ = [
    "AESStreamError",
    "UnsupportedKeySize",
    "KeyLengthMismatch",
    "BlockSizeMismatch",
    "CiphertextAlignmentError",
    "InvalidPadding",
    "BLOCK_SIZE",
    "KEY_SIZES",
    "CipherConfig",
    "KeySize",
    "multiply",
    "key_expansion",
    "cipher_block",
    "inverse_cipher_block",
    "pad",
    "unpad",
    "BlockCipher",
    "encrypt",
    "decrypt",
]
