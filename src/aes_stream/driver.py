"""
Padding and chunk driver.

Turns a variable-length message into padded 16-byte blocks, runs the block
engine over them under one shared key schedule and assembles the output in
block order. Blocks are independent (no chaining), so they may be
transformed on a thread pool; results are still committed in order.
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, BinaryIO, Callable, Union

from .block import cipher_block, inverse_cipher_block
from .errors import CiphertextAlignmentError
from .interfaces import BLOCK_SIZE, CipherConfig, KeySize
from .key_schedule import expand_key
from .padding import pad, split_blocks, unpad

logger = logging.getLogger(__name__)

# Either a callable taking bytes or a binary file-like object
Sink = Union[Callable[[bytes], Any], BinaryIO]

DEFAULT_CHUNK_BLOCKS = 4096


def _as_writer(sink: Sink) -> Callable[[bytes], Any]:
    write = getattr(sink, "write", None)
    if callable(write):
        return write
    if callable(sink):
        return sink
    raise TypeError(f"Sink must be callable or have a write() method, got {type(sink).__name__}")


def _chunk_size(chunk_blocks: int) -> int:
    if chunk_blocks < 1:
        raise ValueError(f"chunk_blocks must be at least 1, got {chunk_blocks}")
    return chunk_blocks * BLOCK_SIZE


def _remaining_length(source: BinaryIO) -> int | None:
    """Bytes left in a seekable source, or None when it cannot be sized."""
    seekable = getattr(source, "seekable", None)
    if seekable is None or not seekable():
        return None
    position = source.tell()
    end = source.seek(0, io.SEEK_END)
    source.seek(position)
    return end - position


class BlockCipher:
    """
    AES session bound to one key.

    The key schedule is expanded once in the constructor and shared
    read-only by every block transform of the session.
    """

    def __init__(self, key_size_bits: int, key: bytes, workers: int = 1):
        """
        Initialize the session.

        Args:
            key_size_bits: 128 or 256
            key: Raw key, 16 or 32 bytes to match key_size_bits
            workers: Threads used to transform blocks (1 = sequential)

        Raises:
            UnsupportedKeySize: If key_size_bits is not 128 or 256
            KeyLengthMismatch: If the key length does not match
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.key_size = KeySize.from_bits(key_size_bits)
        self.workers = workers
        self.schedule = expand_key(key, self.key_size)
        logger.debug(
            "AES-%d session ready: %d rounds, %d workers",
            self.key_size.bits, self.key_size.num_rounds, workers,
        )

    @classmethod
    def from_config(cls, config: CipherConfig, key: bytes) -> BlockCipher:
        return cls(config.key_size_bits, key, workers=config.workers)

    @property
    def num_rounds(self) -> int:
        return self.key_size.num_rounds

    def encrypt_block(self, block: bytes) -> bytes:
        """Encrypt one 16-byte block."""
        return cipher_block(block, self.schedule, self.num_rounds)

    def decrypt_block(self, block: bytes) -> bytes:
        """Decrypt one 16-byte block."""
        return inverse_cipher_block(block, self.schedule, self.num_rounds)

    def _emit(
        self,
        blocks: list[bytes],
        transform: Callable[[bytes], bytes],
        write: Callable[[bytes], Any],
    ) -> int:
        """Transform blocks and hand each result to write() in block order."""
        if self.workers == 1 or len(blocks) < 2:
            for block in blocks:
                write(transform(block))
            return len(blocks) * BLOCK_SIZE

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            try:
                for output in executor.map(transform, blocks):
                    write(output)
            except BaseException:
                executor.shutdown(wait=True, cancel_futures=True)
                raise
        return len(blocks) * BLOCK_SIZE

    def encrypt(self, plaintext: bytes, sink: Sink | None = None) -> bytes:
        """
        Pad and encrypt a whole message.

        Args:
            plaintext: Message of any length
            sink: Optional destination receiving each ciphertext block in order

        Returns:
            Ciphertext, (len(plaintext) // 16 + 1) * 16 bytes
        """
        blocks = split_blocks(pad(plaintext))
        logger.debug("Encrypting %d bytes as %d blocks", len(plaintext), len(blocks))

        outputs: list[bytes] = []
        forward = _as_writer(sink) if sink is not None else None

        def write(data: bytes) -> None:
            if forward is not None:
                forward(data)
            outputs.append(data)

        self._emit(blocks, self.encrypt_block, write)
        return b"".join(outputs)

    def decrypt(self, ciphertext: bytes, sink: Sink | None = None) -> bytes:
        """
        Decrypt a whole message and strip its padding.

        The final block is decrypted and checked first, so a bad length or
        bad padding is reported before anything reaches the sink.

        Args:
            ciphertext: Ciphertext, a non-zero multiple of 16 bytes
            sink: Optional destination receiving plaintext in block order

        Returns:
            Plaintext with padding removed

        Raises:
            CiphertextAlignmentError: If the length is not a positive multiple of 16
            InvalidPadding: If the final block carries an invalid pad length
        """
        blocks = split_blocks(ciphertext)
        if not blocks:
            raise CiphertextAlignmentError("Ciphertext must contain at least one block")
        logger.debug("Decrypting %d blocks", len(blocks))

        tail = unpad(self.decrypt_block(blocks[-1]))

        outputs: list[bytes] = []
        forward = _as_writer(sink) if sink is not None else None

        def write(data: bytes) -> None:
            if forward is not None:
                forward(data)
            outputs.append(data)

        self._emit(blocks[:-1], self.decrypt_block, write)
        if tail:
            write(tail)
        return b"".join(outputs)

    def encrypt_stream(
        self,
        source: BinaryIO,
        sink: Sink,
        chunk_blocks: int = DEFAULT_CHUNK_BLOCKS,
    ) -> int:
        """
        Encrypt everything readable from source into sink.

        Reads chunk_blocks * 16 bytes at a time; the unaligned tail is held
        back until EOF, then padded.

        Returns:
            Number of ciphertext bytes written

        Raises:
            ValueError: If chunk_blocks is less than 1
        """
        chunk_size = _chunk_size(chunk_blocks)
        write = _as_writer(sink)
        pending = b""
        total = 0

        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            data = pending + chunk
            usable = len(data) - len(data) % BLOCK_SIZE
            pending = data[usable:]
            total += self._emit(split_blocks(data[:usable]), self.encrypt_block, write)

        total += self._emit(split_blocks(pad(pending)), self.encrypt_block, write)
        logger.debug("Stream encryption wrote %d bytes", total)
        return total

    def decrypt_stream(
        self,
        source: BinaryIO,
        sink: Sink,
        chunk_blocks: int = DEFAULT_CHUNK_BLOCKS,
    ) -> int:
        """
        Decrypt everything readable from source into sink.

        The last full block is always held back so that padding is only
        stripped from the final block. A seekable source is size-checked
        before any output is written; for other sources a trailing partial
        block is reported at EOF.

        Returns:
            Number of plaintext bytes written

        Raises:
            CiphertextAlignmentError: If the input is empty or not block-aligned
            InvalidPadding: If the final block carries an invalid pad length
            ValueError: If chunk_blocks is less than 1
        """
        chunk_size = _chunk_size(chunk_blocks)
        remaining = _remaining_length(source)
        if remaining is not None and (remaining == 0 or remaining % BLOCK_SIZE):
            raise CiphertextAlignmentError(
                f"Ciphertext length {remaining} is not a positive multiple of {BLOCK_SIZE}"
            )

        write = _as_writer(sink)
        pending = b""
        held: bytes | None = None
        total = 0

        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                break
            data = pending + chunk
            usable = len(data) - len(data) % BLOCK_SIZE
            pending = data[usable:]
            blocks = split_blocks(data[:usable])
            if not blocks:
                continue
            if held is not None:
                blocks.insert(0, held)
            held = blocks.pop()
            total += self._emit(blocks, self.decrypt_block, write)

        if pending:
            raise CiphertextAlignmentError(
                f"Ciphertext ends with a partial block of {len(pending)} bytes"
            )
        if held is None:
            raise CiphertextAlignmentError("Ciphertext must contain at least one block")

        tail = unpad(self.decrypt_block(held))
        if tail:
            write(tail)
            total += len(tail)
        logger.debug("Stream decryption wrote %d bytes", total)
        return total


def encrypt(key_size_bits: int, key: bytes, plaintext: bytes) -> bytes:
    """
    Encrypt a message with AES-128 or AES-256.

    Args:
        key_size_bits: 128 or 256
        key: 16 or 32 byte key
        plaintext: Message of any length

    Returns:
        Concatenated ciphertext blocks, padding included
    """
    return BlockCipher(key_size_bits, key).encrypt(plaintext)


def decrypt(key_size_bits: int, key: bytes, ciphertext: bytes) -> bytes:
    """
    Decrypt a message produced by encrypt().

    Args:
        key_size_bits: 128 or 256
        key: 16 or 32 byte key
        ciphertext: Multiple of 16 bytes

    Returns:
        Plaintext with padding stripped
    """
    return BlockCipher(key_size_bits, key).decrypt(ciphertext)
