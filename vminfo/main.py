"""
vminfo.main
------------
AUTHOR: carter-vin

CLI entrypoint

Key contract:
- `vminfo oneshot` prints one JSON report line and exits 0
- unreadable /proc sources exit 3 (monitoring UNKNOWN)
- `vminfo version` prints version and runtime env
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from pathlib import Path

import typer

from vminfo import __version__
from vminfo.config import ProcSources
from vminfo.logging import emit_event, utc_now_iso
from vminfo.procparser import ProcUnavailableError
from vminfo.report import build_report_from_vmem, report_to_json
from vminfo.vmem import vmem_new, vmem_read, vmem_unref

EXIT_UNKNOWN = 3

app = typer.Typer(
    add_completion=False,
    help="vminfo: kernel virtual memory statistics probe",
)


@dataclass(frozen=True)
class EnvironmentInfo:
    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=utc_now_iso(),
    )


def _resolve_sources(vmstat: str | None, stat: str | None) -> ProcSources:
    """
    CLI flags win over env overrides, env over /proc defaults
    """
    sources = ProcSources.from_env()
    return ProcSources(
        vmstat=Path(vmstat) if vmstat else sources.vmstat,
        stat=Path(stat) if stat else sources.stat,
    )


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: vminfo --help")


@app.command()
def version() -> None:
    """
    Print probe version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"vminfo v{__version__}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("oneshot")
def oneshot(
    vmstat: str | None = typer.Option(
        None,
        "--vmstat",
        help="Path to the vmstat table (default /proc/vmstat).",
    ),
    stat: str | None = typer.Option(
        None,
        "--stat",
        help="Path to the kernel summary table (default /proc/stat).",
    ),
) -> None:
    """
    Read and aggregate vm statistics once, print the report
    """
    sources = _resolve_sources(vmstat, stat)

    emit_event(
        "probe_start",
        probe_version=__version__,
        mode="oneshot",
        vmstat_path=str(sources.vmstat),
        stat_path=str(sources.stat),
    )

    vmem = vmem_new()
    try:
        vmem_read(vmem, sources)
        emit_event("vmem_read", probe_version=__version__, mode="oneshot")

        report = build_report_from_vmem(
            vmem,
            emitted_at=utc_now_iso(),
            probe_version=__version__,
            sources=sources,
        )
        report_json = report_to_json(report)
        typer.echo(report_json)

        emit_event(
            "vmem_report_emitted",
            probe_version=__version__,
            mode="oneshot",
            bytes=len(report_json),
        )

    except ProcUnavailableError as e:
        emit_event(
            "source_unavailable",
            probe_version=__version__,
            mode="oneshot",
            error_type=type(e).__name__,
            message=str(e),
        )
        raise typer.Exit(code=EXIT_UNKNOWN)

    finally:
        vmem = vmem_unref(vmem)
        emit_event("probe_shutdown", probe_version=__version__, mode="oneshot")


if __name__ == "__main__":
    app()
