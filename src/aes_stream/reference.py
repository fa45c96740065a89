"""Reference AES using PyCryptodome, for verification."""

from Crypto.Cipher import AES

from .interfaces import KeySize
from .padding import pad


def reference_encrypt_block(key: bytes, block: bytes) -> bytes:
    """
    Encrypt a single block using PyCryptodome ECB.

    Args:
        key: 16 or 32 byte AES key
        block: 16-byte plaintext block

    Returns:
        16-byte ciphertext block
    """
    if len(block) != 16:
        raise ValueError(f"Block must be 16 bytes, got {len(block)}")
    return AES.new(key, AES.MODE_ECB).encrypt(block)


def reference_decrypt_block(key: bytes, block: bytes) -> bytes:
    """Decrypt a single block using PyCryptodome ECB."""
    if len(block) != 16:
        raise ValueError(f"Block must be 16 bytes, got {len(block)}")
    return AES.new(key, AES.MODE_ECB).decrypt(block)


def reference_encrypt(key_size_bits: int, key: bytes, plaintext: bytes) -> bytes:
    """
    Encrypt a whole message the way the driver does, using PyCryptodome.

    Independent blocks over the zero-fill length padding are exactly ECB
    over the padded message.
    """
    key_size = KeySize.from_bits(key_size_bits)
    if len(key) != key_size.key_bytes:
        raise ValueError(f"Key must be {key_size.key_bytes} bytes, got {len(key)}")
    return AES.new(key, AES.MODE_ECB).encrypt(pad(plaintext))


def validate_against_reference(
    key: bytes, block: bytes, candidate: bytes, inverse: bool = False
) -> tuple[bool, str]:
    """
    Validate a candidate output block against the reference.

    Args:
        key: 16 or 32 byte AES key
        block: 16-byte input block
        candidate: Output block to check
        inverse: Check a decryption instead of an encryption

    Returns:
        Tuple of (is_correct, error_detail)
    """
    if inverse:
        expected = reference_decrypt_block(key, block)
        label = "Plaintext"
    else:
        expected = reference_encrypt_block(key, block)
        label = "Ciphertext"
    if candidate == expected:
        return True, ""
    return False, (
        f"{label} mismatch: expected {expected.hex()}, "
        f"got {candidate.hex()}"
    )


# FIPS-197 known-answer vectors (key size, key, plaintext, ciphertext)
FIPS_197_TEST_VECTORS = [
    # Appendix B
    {
        "key_size": 128,
        "key": bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
        "plaintext": bytes.fromhex("3243f6a8885a308d313198a2e0370734"),
        "ciphertext": bytes.fromhex("3925841d02dc09fbdc118597196a0b32"),
    },
    # Appendix C.1 - AES-128
    {
        "key_size": 128,
        "key": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a"),
    },
    # Appendix C.3 - AES-256
    {
        "key_size": 256,
        "key": bytes.fromhex(
            "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"
        ),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("8ea2b7ca516745bfeafc49904b496089"),
    },
    {
        "key_size": 128,
        "key": bytes.fromhex("00000000000000000000000000000000"),
        "plaintext": bytes.fromhex("00000000000000000000000000000000"),
        "ciphertext": bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e"),
    },
    {
        "key_size": 128,
        "key": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "plaintext": bytes.fromhex("ffffffffffffffffffffffffffffffff"),
        "ciphertext": bytes.fromhex("bcbf217cb280cf30b2517052193ab979"),
    },
    {
        "key_size": 256,
        "key": bytes(32),
        "plaintext": bytes(16),
        "ciphertext": bytes.fromhex("dc95c078a2408989ad48a21492842087"),
    },
]
