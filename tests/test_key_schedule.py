"""Tests for AES key expansion."""

import pytest

from aes_stream.errors import KeyLengthMismatch
from aes_stream.interfaces import KEY_SIZES
from aes_stream.key_schedule import (
    expand_key,
    key_expansion,
    rot_word,
    round_key,
    sub_word,
)


# FIPS-197 Appendix A.1
KEY_128 = "2b7e151628aed2a6abf7158809cf4f3c"
EXPANDED_128 = [
    "2b7e1516", "28aed2a6", "abf71588", "09cf4f3c",
    "a0fafe17", "88542cb1", "23a33939", "2a6c7605",
    "f2c295f2", "7a96b943", "5935807a", "7359f67f",
    "3d80477d", "4716fe3e", "1e237e44", "6d7a883b",
    "ef44a541", "a8525b7f", "b671253b", "db0bad00",
    "d4d1c6f8", "7c839d87", "caf2b8bc", "11f915bc",
    "6d88a37a", "110b3efd", "dbf98641", "ca0093fd",
    "4e54f70e", "5f5fc9f3", "84a64fb2", "4ea6dc4f",
    "ead27321", "b58dbad2", "312bf560", "7f8d292f",
    "ac7766f3", "19fadc21", "28d12941", "575c006e",
    "d014f9a8", "c9ee2589", "e13f0cc8", "b6630ca6",
]

# FIPS-197 Appendix A.3
KEY_256 = "603deb1015ca71be2b73aef0857d77811f352c073b6108d72d9810a30914dff4"
EXPANDED_256 = [
    "603deb10", "15ca71be", "2b73aef0", "857d7781",
    "1f352c07", "3b6108d7", "2d9810a3", "0914dff4",
    "9ba35411", "8e6925af", "a51a8b5f", "2067fcde",
    "a8b09c1a", "93d194cd", "be49846e", "b75d5b9a",
    "d59aecb8", "5bf3c917", "fee94248", "de8ebe96",
    "b5a9328a", "2678a647", "98312229", "2f6c79b3",
    "812c81ad", "dadf48ba", "24360af2", "fab8b464",
    "98c5bfc9", "bebd198e", "268c3ba7", "09e04214",
    "68007bac", "b2df3316", "96e939e4", "6c518d80",
    "c814e204", "76a9fb8a", "5025c02d", "59c58239",
    "de136967", "6ccc5a71", "fa256395", "9674ee15",
    "5886ca5d", "2e2f31d7", "7e0af1fa", "27cf73c3",
    "749c47ab", "18501dda", "e2757e4f", "7401905a",
    "cafaaae3", "e4d59b34", "9adf6ace", "bd10190d",
    "fe4890d1", "e6188d0b", "046df344", "706c631e",
]


class TestWordHelpers:
    """Tests for rot_word and sub_word."""

    def test_rot_word(self):
        assert rot_word(bytes([0x00, 0x01, 0x02, 0x03])) == bytes([0x01, 0x02, 0x03, 0x00])

    def test_rot_word_does_not_mutate(self):
        word = bytearray([0x09, 0xcf, 0x4f, 0x3c])
        rot_word(word)
        assert word == bytearray([0x09, 0xcf, 0x4f, 0x3c])

    def test_sub_word(self):
        # FIPS-197 A.1, i = 4: SubWord(RotWord(09cf4f3c))
        assert sub_word(bytes.fromhex("cf4f3c09")) == bytes.fromhex("8a84eb01")


class TestKeyExpansion:
    """Tests for key_expansion()."""

    def test_128_bit_schedule(self):
        schedule = key_expansion(bytes.fromhex(KEY_128), 4, 10)

        assert len(schedule) == 44
        assert schedule[0] == bytes.fromhex("2b7e1516")
        for i, (word, expected) in enumerate(zip(schedule, EXPANDED_128)):
            assert word.hex() == expected, f"word {i}: expected {expected}, got {word.hex()}"

    def test_256_bit_schedule(self):
        schedule = key_expansion(bytes.fromhex(KEY_256), 8, 14)

        assert len(schedule) == 60
        for i, (word, expected) in enumerate(zip(schedule, EXPANDED_256)):
            assert word.hex() == expected, f"word {i}: expected {expected}, got {word.hex()}"

    def test_first_words_are_the_key(self):
        key = bytes(range(32))
        schedule = key_expansion(key, 8, 14)
        assert b"".join(schedule[:8]) == key

    def test_deterministic(self):
        key = bytes.fromhex(KEY_128)
        assert key_expansion(key, 4, 10) == key_expansion(key, 4, 10)

    def test_schedule_is_immutable(self):
        schedule = key_expansion(bytes(16), 4, 10)
        assert isinstance(schedule, tuple)
        assert all(isinstance(w, bytes) and len(w) == 4 for w in schedule)

    @pytest.mark.parametrize("key_len,key_length,num_rounds", [
        (15, 4, 10),
        (17, 4, 10),
        (32, 4, 10),
        (16, 8, 14),
        (31, 8, 14),
        (0, 4, 10),
    ])
    def test_key_length_mismatch(self, key_len, key_length, num_rounds):
        with pytest.raises(KeyLengthMismatch):
            key_expansion(bytes(key_len), key_length, num_rounds)

    def test_expand_key_uses_key_size(self):
        schedule = expand_key(bytes.fromhex(KEY_256), KEY_SIZES[256])
        assert len(schedule) == KEY_SIZES[256].schedule_words
        assert schedule[-1].hex() == EXPANDED_256[-1]


class TestRoundKey:
    """Tests for round_key()."""

    def test_round_zero_is_key_in_column_major_order(self):
        key = bytes(range(16))
        schedule = key_expansion(key, 4, 10)
        grid = round_key(schedule, 0)

        for row in range(4):
            for col in range(4):
                assert grid[row][col] == key[col * 4 + row]

    def test_last_round(self):
        schedule = key_expansion(bytes.fromhex(KEY_128), 4, 10)
        grid = round_key(schedule, 10)
        # Column 3 is word 43
        assert [grid[row][3] for row in range(4)] == list(bytes.fromhex("b6630ca6"))

    def test_round_out_of_range(self):
        schedule = key_expansion(bytes(16), 4, 10)
        with pytest.raises(ValueError):
            round_key(schedule, 11)
