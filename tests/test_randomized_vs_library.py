"""
Randomized tests comparing the cipher against the PyCryptodome reference.

Tests:
- Single blocks match AES ECB for both key sizes
- Whole messages match ECB over the same zero-fill length padding
- Ciphertexts decrypt with the library
"""

import random

import pytest
from Crypto.Cipher import AES

from aes_stream import decrypt, encrypt
from aes_stream.block import cipher_block, inverse_cipher_block
from aes_stream.key_schedule import key_expansion
from aes_stream.padding import pad
from aes_stream.reference import reference_encrypt, validate_against_reference
from aes_stream.utils import bytes_to_hex


def random_bytes(n: int, rng: random.Random) -> bytes:
    """Generate n random bytes."""
    return bytes(rng.randint(0, 255) for _ in range(n))


class TestBlockRandomized:
    """Random single blocks against the library."""

    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("key_length,num_rounds", [(4, 10), (8, 14)])
    def test_random_key_block(self, seed, key_length, num_rounds):
        rng = random.Random(seed)
        key = random_bytes(key_length * 4, rng)
        block = random_bytes(16, rng)
        schedule = key_expansion(key, key_length, num_rounds)

        computed = cipher_block(block, schedule, num_rounds)
        expected = AES.new(key, AES.MODE_ECB).encrypt(block)

        assert computed == expected, (
            f"Seed {seed}: expected {bytes_to_hex(expected)}, "
            f"got {bytes_to_hex(computed)}"
        )
        assert inverse_cipher_block(expected, schedule, num_rounds) == block

    def test_validate_against_reference(self):
        rng = random.Random(7)
        key = random_bytes(16, rng)
        block = random_bytes(16, rng)
        schedule = key_expansion(key, 4, 10)

        ok, detail = validate_against_reference(key, block, cipher_block(block, schedule, 10))
        assert ok is True
        assert detail == ""

        ok, detail = validate_against_reference(key, block, bytes(16))
        assert ok is False
        assert "mismatch" in detail.lower()

    def test_validate_inverse_against_reference(self):
        rng = random.Random(11)
        key = random_bytes(32, rng)
        block = random_bytes(16, rng)
        schedule = key_expansion(key, 8, 14)

        candidate = inverse_cipher_block(block, schedule, 14)
        ok, detail = validate_against_reference(key, block, candidate, inverse=True)
        assert ok is True
        assert detail == ""

        ok, detail = validate_against_reference(key, block, candidate)
        assert ok is False
        assert detail.startswith("Ciphertext mismatch")

        ok, detail = validate_against_reference(key, block, bytes(16), inverse=True)
        assert ok is False
        assert detail.startswith("Plaintext mismatch")


class TestMessageRandomized:
    """Random messages against ECB over the same padding."""

    @pytest.mark.parametrize("seed", range(10))
    @pytest.mark.parametrize("bits", [128, 256])
    def test_random_message(self, seed, bits):
        rng = random.Random(seed + bits)
        key = random_bytes(bits // 8, rng)
        message = random_bytes(rng.randint(0, 100), rng)

        ciphertext = encrypt(bits, key, message)

        assert ciphertext == reference_encrypt(bits, key, message)
        assert decrypt(bits, key, ciphertext) == message

    @pytest.mark.parametrize("bits", [128, 256])
    def test_library_decrypts_our_output(self, bits):
        rng = random.Random(bits)
        key = random_bytes(bits // 8, rng)
        message = random_bytes(77, rng)

        recovered = AES.new(key, AES.MODE_ECB).decrypt(encrypt(bits, key, message))
        assert recovered == pad(message)

    def test_not_pkcs7(self):
        """The padding differs from PKCS#7 whenever more than one pad byte is added."""
        from Crypto.Util.Padding import pad as pkcs7_pad

        key = bytes(16)
        message = b"thirteen byte"
        ours = encrypt(128, key, message)
        pkcs7 = AES.new(key, AES.MODE_ECB).encrypt(pkcs7_pad(message, 16))
        assert ours != pkcs7
