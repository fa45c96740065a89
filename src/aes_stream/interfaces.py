"""Key size parameters and configuration for the cipher driver."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import UnsupportedKeySize

# Bytes per block; the state is always 4 columns of 4 bytes
BLOCK_SIZE = 16

# Columns in the state (Nb in FIPS-197)
BLOCK_WORDS = 4


@dataclass(frozen=True)
class KeySize:
    """Round parameters tied to one AES key size."""

    bits: int
    key_length_words: int
    num_rounds: int

    @property
    def key_bytes(self) -> int:
        """Raw key length in bytes."""
        return self.key_length_words * 4

    @property
    def schedule_words(self) -> int:
        """Number of 4-byte words in the expanded key schedule."""
        return BLOCK_WORDS * (self.num_rounds + 1)

    @classmethod
    def from_bits(cls, bits: int) -> KeySize:
        """Look up the parameters for a key size given in bits.

        Raises:
            UnsupportedKeySize: If bits is not 128 or 256
        """
        try:
            return KEY_SIZES[bits]
        except KeyError:
            available = ", ".join(str(b) for b in KEY_SIZES)
            raise UnsupportedKeySize(
                f"Key size must be one of {available} bits, got {bits}"
            ) from None


KEY_SIZES: dict[int, KeySize] = {
    128: KeySize(bits=128, key_length_words=4, num_rounds=10),
    256: KeySize(bits=256, key_length_words=8, num_rounds=14),
}


@dataclass
class CipherConfig:
    """Configuration for a cipher session.

    Built once by the caller (or the CLI) and handed to the driver.
    """

    # Key size in bits (128 or 256)
    key_size_bits: int = 128

    # Worker threads for block transforms; 1 = strictly sequential
    workers: int = 1

    # Blocks read per chunk when streaming from a file object
    chunk_blocks: int = 4096

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.key_size_bits not in KEY_SIZES:
            raise UnsupportedKeySize(
                f"key_size_bits must be 128 or 256, got {self.key_size_bits}"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.chunk_blocks < 1:
            raise ValueError(f"chunk_blocks must be at least 1, got {self.chunk_blocks}")

    @property
    def key_size(self) -> KeySize:
        return KEY_SIZES[self.key_size_bits]

    @property
    def num_rounds(self) -> int:
        """Number of cipher rounds (10 or 14)."""
        return self.key_size.num_rounds

    @property
    def key_length_words(self) -> int:
        """Key length in 4-byte words (4 or 8)."""
        return self.key_size.key_length_words

    @property
    def chunk_size(self) -> int:
        """Bytes read per chunk when streaming."""
        return self.chunk_blocks * BLOCK_SIZE
