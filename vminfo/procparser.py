"""
vminfo.procparser
AUTHOR: carter-vin

Generic key/value table parser for /proc text files

Contract:
- one "<key><delimiter><value>" entry per line
- unknown keys skipped (kernels add and remove fields)
- malformed values stored as 0, never fatal
- unreadable file is fatal -> ProcUnavailableError
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Hashable, Iterable, Optional, Protocol


class ProcUnavailableError(RuntimeError):
    """
    Raised when a /proc source cannot be opened

    Means /proc is not mounted or the host is unsupported
    """


@dataclass(frozen=True)
class SchemaEntry:
    key: str
    field: Hashable


class FieldSink(Protocol):
    def set_field(self, field: Any, value: int) -> None: ...


def is_counter(token: str) -> bool:
    # ASCII only: str.isdigit() also accepts superscripts int() rejects
    return token.isascii() and token.isdigit()


def parse_counter(token: str) -> int:
    """
    Parse an unsigned counter; anything else is 0
    """
    if not is_counter(token):
        return 0
    return int(token)


def _split_line(line: str, delimiter: str) -> list[str]:
    # Space delimiter tolerates runs of blanks and tabs
    if delimiter.isspace():
        return line.split()

    key, found, rest = line.partition(delimiter)
    key = key.strip()
    if not key:
        return []
    if not found:
        return [key]
    return [key] + rest.split()


def _open_source(path: Path):
    try:
        return path.open(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ProcUnavailableError(f"cannot open {path}: /proc must be mounted") from e


def parse_table(
    path: Path,
    schema: Iterable[SchemaEntry],
    sink: FieldSink,
    delimiter: str = " ",
) -> int:
    """
    Scan a key/value table and store matched values into sink

    Returns the number of matched lines
    """
    lookup = {entry.key: entry.field for entry in schema}
    matched = 0

    with _open_source(Path(path)) as handle:
        for line in handle:
            parts = _split_line(line, delimiter)
            if not parts:
                continue

            field = lookup.get(parts[0])
            if field is None:
                continue

            value = parse_counter(parts[1]) if len(parts) > 1 else 0
            sink.set_field(field, value)
            matched += 1

    return matched


def read_summary_pair(path: Path, marker: str) -> Optional[tuple[int, int]]:
    """
    Find the first "<marker> <uint> <uint>" line of a summary table

    Returns None when no such line exists
    """
    with _open_source(Path(path)) as handle:
        for line in handle:
            parts = line.split()
            if len(parts) < 3 or parts[0] != marker:
                continue
            if not (is_counter(parts[1]) and is_counter(parts[2])):
                continue
            return int(parts[1]), int(parts[2])

    return None
