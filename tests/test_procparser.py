"""
Contract tests for the /proc key/value table parser
"""

from pathlib import Path

import pytest

from vminfo.procparser import ProcUnavailableError, SchemaEntry, parse_table, read_summary_pair


class _Sink:
    def __init__(self) -> None:
        self.values: dict[str, int] = {}

    def set_field(self, field, value: int) -> None:
        self.values[field] = value


SCHEMA = (
    SchemaEntry(key="pgfault", field="pgfault"),
    SchemaEntry(key="pgmajfault", field="pgmajfault"),
    SchemaEntry(key="pswpin", field="pswpin"),
)


def test_parse_table_matches_known_keys(tmp_path: Path) -> None:
    """
    Known keys are stored, unknown keys and blank lines are skipped
    """
    path = tmp_path / "vmstat"
    path.write_text("nr_free_pages 12\n\npgfault 50\npgmajfault 3\nthp_split 9\n", encoding="utf-8")

    sink = _Sink()
    matched = parse_table(path, SCHEMA, sink, " ")

    assert matched == 2
    assert sink.values == {"pgfault": 50, "pgmajfault": 3}


def test_parse_table_malformed_value_is_zero(tmp_path: Path) -> None:
    """
    A bad number stores 0 and parsing continues
    """
    path = tmp_path / "vmstat"
    path.write_text("pgfault notanumber\npgmajfault -4\npswpin 7\n", encoding="utf-8")

    sink = _Sink()
    parse_table(path, SCHEMA, sink)

    assert sink.values == {"pgfault": 0, "pgmajfault": 0, "pswpin": 7}


def test_parse_table_tolerates_missing_and_trailing_fields(tmp_path: Path) -> None:
    path = tmp_path / "vmstat"
    path.write_text("pgfault\npgmajfault 8 extra tokens\n", encoding="utf-8")

    sink = _Sink()
    parse_table(path, SCHEMA, sink)

    assert sink.values == {"pgfault": 0, "pgmajfault": 8}


def test_parse_table_duplicate_key_last_wins(tmp_path: Path) -> None:
    path = tmp_path / "vmstat"
    path.write_text("pgfault 1\npgfault 2\n", encoding="utf-8")

    sink = _Sink()
    parse_table(path, SCHEMA, sink)

    assert sink.values["pgfault"] == 2


def test_parse_table_long_lines(tmp_path: Path) -> None:
    """
    Lines far longer than any fixed buffer do not bleed into the next line
    """
    path = tmp_path / "vmstat"
    path.write_text("x" * 10000 + " 5\npgfault 11\n", encoding="utf-8")

    sink = _Sink()
    parse_table(path, SCHEMA, sink)

    assert sink.values == {"pgfault": 11}


def test_parse_table_custom_delimiter(tmp_path: Path) -> None:
    """
    meminfo style "Key:   value kB" lines
    """
    path = tmp_path / "meminfo"
    path.write_text("pgfault:      42 kB\npgmajfault 9\n", encoding="utf-8")

    sink = _Sink()
    parse_table(path, SCHEMA, sink, ":")

    assert sink.values == {"pgfault": 42}


def test_parse_table_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ProcUnavailableError, match="/proc must be mounted"):
        parse_table(tmp_path / "nope", SCHEMA, _Sink())


def test_read_summary_pair(tmp_path: Path) -> None:
    """
    Only a well formed "<marker> <uint> <uint>" line matches
    """
    path = tmp_path / "stat"
    path.write_text("cpu 1 2 3 4\nswap x 1\nswap 10 20\npage 5 6\n", encoding="utf-8")

    assert read_summary_pair(path, "swap") == (10, 20)
    assert read_summary_pair(path, "page") == (5, 6)
    assert read_summary_pair(path, "intr") is None


def test_parse_table_non_ascii_digits_are_zero(tmp_path: Path) -> None:
    """
    Unicode digits such as superscripts are malformed, not fatal
    """
    path = tmp_path / "vmstat"
    path.write_text("pgfault ²\npgmajfault 3\n", encoding="utf-8")

    sink = _Sink()
    parse_table(path, SCHEMA, sink)

    assert sink.values == {"pgfault": 0, "pgmajfault": 3}


def test_parse_table_invalid_utf8_is_zero(tmp_path: Path) -> None:
    path = tmp_path / "vmstat"
    path.write_bytes(b"pgfault \xff\npgmajfault 3\n")

    sink = _Sink()
    parse_table(path, SCHEMA, sink)

    assert sink.values == {"pgfault": 0, "pgmajfault": 3}


def test_read_summary_pair_skips_non_ascii_digits(tmp_path: Path) -> None:
    path = tmp_path / "stat"
    path.write_text("swap ¹ 2\npage 3 ²\n", encoding="utf-8")

    assert read_summary_pair(path, "swap") is None
    assert read_summary_pair(path, "page") is None
