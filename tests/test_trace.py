"""
Tests for per-step trace output.

Verifies that:
- Output is unchanged with tracing enabled
- The expected number of steps is recorded in pipeline order
- JSON Lines and verbose output carry the per-step states
"""

import contextlib
import io
import json

import pytest

from aes_stream.block import cipher_block, inverse_cipher_block
from aes_stream.key_schedule import key_expansion
from aes_stream.trace import TraceRecorder
from aes_stream.utils import hex_to_bytes, state_to_bytes


KEY = hex_to_bytes("000102030405060708090a0b0c0d0e0f")
PT = hex_to_bytes("00112233445566778899aabbccddeeff")
CT = hex_to_bytes("69c4e0d86a7b0430d8cdb78070b4c55a")


class TestTraceRecords:
    """Structure of recorded steps."""

    @pytest.mark.parametrize("key_length,num_rounds,steps", [(4, 10, 41), (8, 14, 57)])
    def test_step_count(self, key_length, num_rounds, steps):
        schedule = key_expansion(bytes(key_length * 4), key_length, num_rounds)
        tracer = TraceRecorder()

        cipher_block(bytes(16), schedule, num_rounds, tracer)
        assert len(tracer.get_records()) == steps

        tracer.clear()
        inverse_cipher_block(bytes(16), schedule, num_rounds, tracer)
        assert len(tracer.get_records()) == steps

    def test_ciphertext_unchanged(self):
        schedule = key_expansion(KEY, 4, 10)
        assert cipher_block(PT, schedule, 10, TraceRecorder()) == CT

    def test_encrypt_step_order(self):
        schedule = key_expansion(KEY, 4, 10)
        tracer = TraceRecorder()
        cipher_block(PT, schedule, 10, tracer)

        ops = tracer.operations()
        assert ops[:2] == ["Input", "AddRoundKey"]
        assert ops[2:6] == ["SubBytes", "ShiftRows", "MixColumns", "AddRoundKey"]
        assert ops[-3:] == ["SubBytes", "ShiftRows", "AddRoundKey"]
        assert ops.count("MixColumns") == 9

    def test_decrypt_step_order(self):
        schedule = key_expansion(KEY, 4, 10)
        tracer = TraceRecorder()
        inverse_cipher_block(CT, schedule, 10, tracer)

        ops = tracer.operations()
        assert ops[2:6] == ["InvShiftRows", "InvSubBytes", "AddRoundKey", "InvMixColumns"]
        assert ops[-3:] == ["InvShiftRows", "InvSubBytes", "AddRoundKey"]
        assert ops.count("InvMixColumns") == 9

    def test_round_one_start_state(self):
        """FIPS-197 C.1: round[1].start = 00102030405060708090a0b0c0d0e0f0."""
        schedule = key_expansion(KEY, 4, 10)
        tracer = TraceRecorder()
        cipher_block(PT, schedule, 10, tracer)

        after_first_ark = tracer.get_records()[1]
        assert after_first_ark["round"] == 0
        assert state_to_bytes(after_first_ark["state"]).hex() == "00102030405060708090a0b0c0d0e0f0"

    def test_last_state_is_output(self):
        schedule = key_expansion(KEY, 4, 10)
        tracer = TraceRecorder()
        cipher_block(PT, schedule, 10, tracer)
        assert state_to_bytes(tracer.get_records()[-1]["state"]) == CT


class TestTraceOutput:
    """JSON Lines and verbose output."""

    def test_jsonl(self):
        buf = io.StringIO()
        schedule = key_expansion(KEY, 4, 10)
        cipher_block(PT, schedule, 10, TraceRecorder(trace_file=buf))

        lines = buf.getvalue().splitlines()
        assert len(lines) == 41
        first = json.loads(lines[0])
        last = json.loads(lines[-1])
        assert first == {"round": 0, "operation": "Input", "state": PT.hex()}
        assert last["state"] == CT.hex()
        assert last["round"] == 10

    def test_verbose(self):
        buf = io.StringIO()
        schedule = key_expansion(KEY, 4, 10)
        with contextlib.redirect_stdout(buf):
            cipher_block(PT, schedule, 10, TraceRecorder(verbose=True))

        output = buf.getvalue()
        assert "MixColumns" in output
        assert f"STATE:{CT.hex()}" in output
        assert len(output.splitlines()) == 41

    def test_silent_by_default(self):
        buf = io.StringIO()
        schedule = key_expansion(KEY, 4, 10)
        with contextlib.redirect_stdout(buf):
            cipher_block(PT, schedule, 10, TraceRecorder())
        assert buf.getvalue() == ""
