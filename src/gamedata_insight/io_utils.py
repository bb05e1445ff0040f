"""File helpers for reading the collaborators' serialized outputs.

Relationship catalogues and flattened records arrive as JSON arrays, single
JSON objects or NDJSON, optionally gzipped.
"""
from __future__ import annotations

import gzip
import io
import json
import subprocess  # nosec B404: subprocess is used safely for internal commands
from collections.abc import Iterator, Sequence
from typing import Any

import ijson

from .logging_config import get_logger

logger = get_logger(__name__)

__all__ = [
    "CommandError",
    "_run",
    "open_text",
    "open_binary",
    "sniff_ndjson",
    "iter_records",
    "all_records",
]


class CommandError(Exception):
    """Raised when `_run` fails with a non-zero exit code."""

    def __init__(self, cmd: Sequence[str], returncode: int, stdout: str, stderr: str):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command {cmd} failed with {returncode}: {stderr.strip()}")


def _run(args, cwd=None, env=None, check_untrusted=True, check=True):
    """
    Run a subprocess safely (no shell).

    Returns the CompletedProcess. When ``check`` is true a non-zero exit code
    raises CommandError instead.

    Raises
    ------
    ValueError
        If args is empty or contains non-strings (or suspicious chars when enabled).
    CommandError
        If ``check`` is set and the command exits with non-zero status.
    """
    if not isinstance(args, (list, tuple)) or not args:
        raise ValueError("args must be a non-empty list of strings")

    for a in args:
        if not isinstance(a, str):
            raise ValueError(f"Non-string arg: {a!r}")
        if check_untrusted and any(c in a for c in [";", "|", "&", "\n", "\r"]):
            raise ValueError(f"Suspicious characters in arg: {a!r}")

    res = subprocess.run(
        args, cwd=cwd, capture_output=True, text=True, env=env
    )  # nosec B603: args are internally constructed

    if check and res.returncode != 0:
        raise CommandError(args, res.returncode, res.stdout, res.stderr)

    return res


def open_text(path: str) -> io.TextIOWrapper:
    """
    Open a path as text, auto-detecting gzip via magic bytes.

    - Uses UTF-8 with BOM support (`utf-8-sig`)
    - Raises UnicodeDecodeError on invalid sequences (`errors='strict')
    """
    f = open(path, "rb")
    magic = f.read(2)
    f.seek(0)
    if magic == b"\x1f\x8b":
        return io.TextIOWrapper(
            gzip.GzipFile(fileobj=f),  # type: ignore
            encoding="utf-8-sig",
            errors="strict",
        )
    return io.TextIOWrapper(f, encoding="utf-8-sig", errors="strict")


def open_binary(path: str):
    """
    Open a path as *binary*, auto-detecting gzip via magic bytes.
    Useful for `ijson`, which prefers bytes streams.
    """
    f = open(path, "rb")
    head = f.read(2)
    f.seek(0)
    if head == b"\x1f\x8b":  # gzip magic
        return gzip.GzipFile(fileobj=f)
    return f


def sniff_ndjson(sample: str) -> bool:
    """
    Heuristic: if the first two non-empty lines both start with '{', treat as NDJSON.
    """
    lines = [ln.strip() for ln in sample.splitlines() if ln.strip()]
    return len(lines) >= 2 and lines[0].startswith("{") and lines[1].startswith("{")


def iter_records(path: str) -> Iterator[Any]:
    """
    Yield records from a JSON-ish file that could be:
      1) NDJSON (one JSON object per line)
      2) A single JSON object
      3) A JSON array of objects (streamed with ijson)

    Includes a fallback for NDJSON where the first record is longer than the sniff buffer.
    """
    with open_text(path) as f:
        buf = f.read(8192)
        f.seek(0)

        if not buf.strip():
            return
        s = buf.lstrip()

        # 1) Typical NDJSON (short lines)
        if sniff_ndjson(buf):
            for line in f:
                line = line.strip()
                if line:
                    yield json.loads(line)
            return

        # 2) Single object OR NDJSON with a very long first line
        if s.startswith("{"):
            try:
                yield json.load(f)
                return
            except json.JSONDecodeError:
                f.seek(0)
                for line in f:
                    line = line.strip()
                    if line:
                        yield json.loads(line)
                return

        # 3) Top-level JSON array
        if s.startswith("["):
            with open_binary(path) as fb:
                yield from ijson.items(fb, "item")
            return

        # 4) Last resort: line-by-line JSON-ish
        for line in f:
            line = line.strip()
            if line:
                yield json.loads(line)


def all_records(path: str, max_records: int | None = None) -> list[Any]:
    """
    Read ALL records from a file.

    Parameters
    ----------
    path : str
        Path to the data file
    max_records : int, optional
        Maximum number of records to read (safety limit). If None, reads all.
    """
    records = []
    for i, rec in enumerate(iter_records(path)):
        if max_records is not None and i >= max_records:
            logger.warning("Stopped at %d records (safety limit)", max_records)
            break
        records.append(rec)
    return records
