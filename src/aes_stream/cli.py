"""Command-line interface for AES stream encryption."""

from __future__ import annotations

import logging
import os
import random
import secrets
import sys
from typing import TextIO

import click

from . import __version__, DEFAULT_BLOCK_HEX, DEFAULT_KEY_HEX
from .block import cipher_block, inverse_cipher_block
from .driver import BlockCipher
from .errors import AESStreamError
from .interfaces import CipherConfig, KeySize
from .key_schedule import expand_key
from .reference import (
    FIPS_197_TEST_VECTORS,
    reference_encrypt,
    validate_against_reference,
)
from .trace import TraceRecorder, print_header, print_result, print_state
from .utils import bytes_to_hex, bytes_to_state, hex_to_bytes

logger = logging.getLogger(__name__)

KEYSIZE_OPTION = click.option(
    "--keysize",
    type=click.Choice(["128", "256"]),
    required=True,
    help="Size of the key in bits, either 128 or 256",
)


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _run_file_command(
    mode: str,
    keysize: str,
    keyfile: str,
    inputfile: str,
    outputfile: str,
    workers: int,
    chunk_blocks: int,
) -> None:
    """Encrypt or decrypt inputfile into outputfile, removing the output on failure."""
    try:
        config = CipherConfig(
            key_size_bits=int(keysize),
            workers=workers,
            chunk_blocks=chunk_blocks,
        )
        cipher = BlockCipher.from_config(config, _read_file(keyfile))
    except (AESStreamError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Opening the output truncates it, which would empty the input first
    if os.path.exists(outputfile) and os.path.samefile(inputfile, outputfile):
        click.echo(f"Error: Input and output are the same file: {outputfile}", err=True)
        sys.exit(1)

    logger.info("%s %s -> %s (AES-%s)", mode, inputfile, outputfile, keysize)
    opened = False
    try:
        with open(inputfile, "rb") as source, open(outputfile, "wb") as sink:
            opened = True
            if mode == "encrypt":
                written = cipher.encrypt_stream(source, sink, chunk_blocks=config.chunk_blocks)
            else:
                written = cipher.decrypt_stream(source, sink, chunk_blocks=config.chunk_blocks)
    except (AESStreamError, OSError) as e:
        # Only remove output this run truncated or created
        if opened and os.path.exists(outputfile):
            os.remove(outputfile)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    logger.info("Wrote %d bytes to %s", written, outputfile)


@click.group()
@click.version_option(version=__version__, prog_name="aes-stream")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level (default: WARNING)",
)
def main(log_level: str) -> None:
    """AES-128/256 encryption of arbitrary-length files.

    Blocks are processed independently with trailing length padding.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@KEYSIZE_OPTION
@click.option("--keyfile", type=click.Path(exists=True, dir_okay=False), required=True,
              help="File containing a key of the specified size")
@click.option("--inputfile", type=click.Path(exists=True, dir_okay=False), required=True,
              help="File containing the input text")
@click.option("--outputfile", type=click.Path(dir_okay=False), default="output.txt",
              help="File for the result (default: output.txt)")
@click.option("--workers", type=int, default=1, help="Worker threads (default: 1)")
@click.option("--chunk-blocks", type=int, default=4096,
              help="Blocks read per chunk (default: 4096)")
def encrypt(
    keysize: str,
    keyfile: str,
    inputfile: str,
    outputfile: str,
    workers: int,
    chunk_blocks: int,
) -> None:
    """Encrypt INPUTFILE into OUTPUTFILE."""
    _run_file_command("encrypt", keysize, keyfile, inputfile, outputfile, workers, chunk_blocks)


@main.command()
@KEYSIZE_OPTION
@click.option("--keyfile", type=click.Path(exists=True, dir_okay=False), required=True,
              help="File containing a key of the specified size")
@click.option("--inputfile", type=click.Path(exists=True, dir_okay=False), required=True,
              help="File containing the ciphertext")
@click.option("--outputfile", type=click.Path(dir_okay=False), default="output.txt",
              help="File for the result (default: output.txt)")
@click.option("--workers", type=int, default=1, help="Worker threads (default: 1)")
@click.option("--chunk-blocks", type=int, default=4096,
              help="Blocks read per chunk (default: 4096)")
def decrypt(
    keysize: str,
    keyfile: str,
    inputfile: str,
    outputfile: str,
    workers: int,
    chunk_blocks: int,
) -> None:
    """Decrypt INPUTFILE into OUTPUTFILE."""
    _run_file_command("decrypt", keysize, keyfile, inputfile, outputfile, workers, chunk_blocks)


@main.command()
@KEYSIZE_OPTION
@click.option("--key", "key_hex", type=str, default=None,
              help="Key as hex (default: FIPS-197 Appendix C key)")
@click.option("--block", "block_hex", type=str, default=DEFAULT_BLOCK_HEX,
              help="16-byte block as hex (default: FIPS-197 Appendix C input)")
@click.option("--decrypt", "inverse", is_flag=True, help="Run the inverse cipher")
@click.option("--verbose", "-v", is_flag=True, help="Print the state after every step")
@click.option("--trace", "trace_path", type=click.Path(dir_okay=False), default=None,
              help="Write a JSON Lines trace to this file")
def block(
    keysize: str,
    key_hex: str | None,
    block_hex: str,
    inverse: bool,
    verbose: bool,
    trace_path: str | None,
) -> None:
    """Run one block through the cipher and check it against PyCryptodome."""
    key_size = KeySize.from_bits(int(keysize))
    if key_hex is None:
        key_hex = DEFAULT_KEY_HEX[:key_size.key_bytes * 2]

    try:
        key = hex_to_bytes(key_hex)
        data = hex_to_bytes(block_hex)
    except ValueError as e:
        click.echo(f"Error: Invalid hex: {e}", err=True)
        sys.exit(1)

    direction = "Decryption" if inverse else "Encryption"
    print_header(f"AES-{key_size.bits} Block {direction}")
    click.echo(f"Key:   {key_hex}")
    click.echo(f"Block: {block_hex}")

    trace_file: TextIO | None = None
    if trace_path:
        try:
            trace_file = open(trace_path, "w")
        except OSError as e:
            click.echo(f"Error: Cannot open trace file: {e}", err=True)
            sys.exit(1)

    tracer = TraceRecorder(verbose=verbose, trace_file=trace_file)
    try:
        schedule = expand_key(key, key_size)
        print_state("Input state", bytes_to_state(data))
        if inverse:
            output = inverse_cipher_block(data, schedule, key_size.num_rounds, tracer)
        else:
            output = cipher_block(data, schedule, key_size.num_rounds, tracer)
    except AESStreamError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        if trace_file:
            trace_file.close()

    passed, detail = validate_against_reference(key, data, output, inverse=inverse)
    print_result(bytes_to_hex(output), len(tracer.get_records()), passed)
    if not passed:
        click.echo(detail)
        sys.exit(1)


@main.command()
@click.option("--n", "num_tests", type=int, default=50,
              help="Number of random messages per key size (default: 50)")
@click.option("--seed", type=int, default=None, help="Random seed for reproducibility")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def selftest(num_tests: int, seed: int | None, verbose: bool) -> None:
    """Validate against FIPS-197 vectors and random PyCryptodome comparisons."""
    click.echo("Running FIPS-197 KAT tests...")
    fips_passed = 0

    for i, vec in enumerate(FIPS_197_TEST_VECTORS):
        key_size = KeySize.from_bits(vec["key_size"])
        schedule = expand_key(vec["key"], key_size)
        ct = cipher_block(vec["plaintext"], schedule, key_size.num_rounds)
        pt = inverse_cipher_block(vec["ciphertext"], schedule, key_size.num_rounds)
        if ct == vec["ciphertext"] and pt == vec["plaintext"]:
            fips_passed += 1
            if verbose:
                click.echo(f"  FIPS test {i+1} (AES-{key_size.bits}): PASS")
        else:
            click.echo(f"  FIPS test {i+1} (AES-{key_size.bits}): FAIL - got {ct.hex()}")

    click.echo(f"FIPS-197 tests: {fips_passed}/{len(FIPS_197_TEST_VECTORS)} passed")

    if seed is not None:
        rng = random.Random(seed)
        random_bytes = lambda n: bytes(rng.randint(0, 255) for _ in range(n))
        random_length = lambda: rng.randint(0, 64)
    else:
        random_bytes = secrets.token_bytes
        random_length = lambda: secrets.randbelow(65)

    click.echo(f"\nRunning {num_tests} random messages per key size...")
    random_passed = 0
    random_total = 0

    for bits in (128, 256):
        for i in range(num_tests):
            random_total += 1
            key = random_bytes(bits // 8)
            message = random_bytes(random_length())
            cipher = BlockCipher(bits, key)

            ciphertext = cipher.encrypt(message)
            ok = ciphertext == reference_encrypt(bits, key, message)
            ok = ok and cipher.decrypt(ciphertext) == message
            if ok:
                random_passed += 1
            elif verbose:
                click.echo(f"  AES-{bits} message {i+1} ({len(message)} bytes): FAIL")

    click.echo(f"Random tests: {random_passed}/{random_total} passed")

    total_passed = fips_passed + random_passed
    total_tests = len(FIPS_197_TEST_VECTORS) + random_total

    click.echo("")
    if total_passed == total_tests:
        click.echo(f"SELFTEST PASSED: All {total_tests} tests passed")
        sys.exit(0)
    else:
        click.echo(f"SELFTEST FAILED: {total_tests - total_passed} failures")
        sys.exit(1)


if __name__ == "__main__":
    main()
