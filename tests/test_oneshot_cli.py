"""
Contract tests for the oneshot CLI
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from vminfo.main import EXIT_UNKNOWN, app


def _lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.strip()]


def test_oneshot_emits_report(tmp_path: Path) -> None:
    """
    One report line between probe_start and probe_shutdown events
    """
    vmstat = tmp_path / "vmstat"
    stat = tmp_path / "stat"
    vmstat.write_text("pgpgin 100\npgpgout 200\npgfault 50\npgmajfault 3\npswpin 4\npswpout 9\n")
    stat.write_text("cpu 1 2 3\n")

    runner = CliRunner()
    result = runner.invoke(app, ["oneshot", "--vmstat", str(vmstat), "--stat", str(stat)])

    assert result.exit_code == 0

    lines = _lines(result.stdout)
    assert lines[0]["event_type"] == "probe_start"
    assert lines[-1]["event_type"] == "probe_shutdown"

    reports = [line for line in lines if "counters" in line]
    assert len(reports) == 1

    counters = reports[0]["counters"]
    assert counters["pgpgin"] == 100
    assert counters["pgfault"] == 50
    assert counters["pgmajfault"] == 3
    assert counters["pswpin"] == 4
    assert counters["pswpout"] == 9
    assert reports[0]["pagesize"] > 0


def test_oneshot_env_override(tmp_path: Path) -> None:
    vmstat = tmp_path / "vmstat"
    stat = tmp_path / "stat"
    vmstat.write_text("pgfault 7\n")
    stat.write_text("page 1 2\nswap 3 4\n")

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["oneshot"],
        env={"VMINFO_PROC_VMSTAT": str(vmstat), "VMINFO_PROC_STAT": str(stat)},
    )

    assert result.exit_code == 0

    report = next(line for line in _lines(result.stdout) if "counters" in line)
    assert report["counters"]["pgfault"] == 7
    assert report["counters"]["pgpgin"] == 1
    assert report["counters"]["pswpout"] == 4


def test_oneshot_missing_source_exits_unknown(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["oneshot", "--vmstat", str(tmp_path / "missing"), "--stat", str(tmp_path / "missing")],
    )

    assert result.exit_code == EXIT_UNKNOWN

    events = [line["event_type"] for line in _lines(result.stdout)]
    assert events == ["probe_start", "source_unavailable", "probe_shutdown"]
