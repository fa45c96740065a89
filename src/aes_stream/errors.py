"""Exception types raised by the cipher engine and the chunk driver."""


class AESStreamError(Exception):
    """Base exception for all cipher errors."""


class UnsupportedKeySize(AESStreamError, ValueError):
    """Key size is not one of the supported sizes (128 or 256 bits)."""


class KeyLengthMismatch(AESStreamError, ValueError):
    """Key byte length does not match the declared key size."""


class BlockSizeMismatch(AESStreamError, ValueError):
    """A buffer handed to the block engine is not exactly 16 bytes."""


class CiphertextAlignmentError(AESStreamError, ValueError):
    """Ciphertext length is not a multiple of the block size."""


class InvalidPadding(AESStreamError, ValueError):
    """Final decrypted byte is not a valid padding length."""
