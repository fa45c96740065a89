"""
Trace recording and pretty printing for single-block AES runs.

Contains:
- TraceRecorder: JSON Lines trace + compact verbose per-step output
- print_header / print_result: shared formatting helpers
"""

import json
from typing import Any, TextIO

from .utils import format_state_grid, format_state_line


class TraceRecorder:
    """
    Records the state after every round step of a block transform.

    Supports:
    - JSON Lines file output  (when trace_file is set)
    - Verbose stdout          (one line per step)
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, **kwargs) -> None:
        """Record a trace entry (round, operation, state)."""
        self._records.append(kwargs)

        if self.trace_file:
            self._write_jsonl(kwargs)

        if self.verbose:
            self._print_verbose(kwargs)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = dict(record)
        if "state" in serializable:
            serializable["state"] = format_state_line(serializable["state"])
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _print_verbose(self, record: dict[str, Any]) -> None:
        round_num = record.get("round", "?")
        operation = record.get("operation", "unknown")

        if "state" in record:
            state_hex = format_state_line(record["state"])
            print(f"R{round_num:<2} {operation:14s} STATE:{state_hex}")

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def operations(self) -> list[str]:
        """Operation names in the order they were recorded."""
        return [r.get("operation", "") for r in self._records]

    def clear(self) -> None:
        self._records.clear()


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*70}")
    print(f"# {title}")
    print(f"{'#'*70}")


def print_state(title: str, state: list[list[int]]) -> None:
    print(f"{title}:")
    print(format_state_grid(state))


def print_result(output_hex: str, steps: int, passed: bool = True) -> None:
    """Print final block result."""
    print(f"\n{'='*70}")
    print("RESULT")
    print(f"{'='*70}")
    print(f"Output: {output_hex}")
    print(f"Steps: {steps}")

    status = "PASS" if passed else "FAIL"
    marker = "[OK]" if passed else "[ERROR]"
    print(f"Verification: {marker} {status}")
    print(f"{'='*70}")
