"""
vminfo.report
AUTHOR: carter-vin

Report envelope for one probe run

- Versioned ("schema_version" = "1")
- Explicit to_dict(), no __dict__ serialization
- Sorted keys so output is byte-stable for the same counters
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from vminfo.config import DEFAULT_SOURCES, ProcSources
from vminfo.vmem import (
    VmemHandle,
    get_page_io,
    get_pagesize,
    get_pgalloc,
    get_pgfault,
    get_pgfree,
    get_pgmajfault,
    get_pgrefill,
    get_pgscan,
    get_pgscand,
    get_pgscank,
    get_pgsteal,
    get_swap_io,
)

SCHEMA_VERSION = "1"


@dataclass(frozen=True)
class Timing:
    emitted_at: str

    def to_dict(self) -> dict[str, Any]:
        return {"emitted_at": self.emitted_at}


@dataclass(frozen=True)
class Meta:
    """
    - schema_version: report layout version
    - probe_version: package version that produced it
    - sources: files the counters came from
    """

    schema_version: str
    probe_version: str
    sources: dict[str, str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "probe_version": self.probe_version,
            "sources": dict(self.sources),
        }


@dataclass(frozen=True)
class VmemReport:
    pagesize: int
    counters: dict[str, int]
    timing: Timing
    meta: Meta

    def to_dict(self) -> dict[str, Any]:
        return {
            "pagesize": self.pagesize,
            "counters": dict(self.counters),
            "timing": self.timing.to_dict(),
            "meta": self.meta.to_dict(),
        }


def report_to_json(report: VmemReport) -> str:
    return json.dumps(
        report.to_dict(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def validate_report(report: VmemReport) -> None:
    """
    Raises ValueError on invalid report
    """
    if report.pagesize <= 0:
        raise ValueError("pagesize must be > 0")

    for name, value in report.counters.items():
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise ValueError(f"counters.{name} must be a non-negative int")

    if not report.timing.emitted_at:
        raise ValueError("timing.emitted_at is empty")

    if report.meta.schema_version != SCHEMA_VERSION:
        raise ValueError(f"meta.schema_version must be: '{SCHEMA_VERSION}'")
    if not report.meta.probe_version:
        raise ValueError("meta.probe_version must be non-empty")


def build_report_from_vmem(
    vmem: Optional[VmemHandle],
    *,
    emitted_at: str,
    probe_version: str,
    sources: ProcSources = DEFAULT_SOURCES,
    pagesize: int | None = None,
) -> VmemReport:
    """
    Assemble a report from an already read handle

    Page and swap I/O go through their /proc/stat fallbacks here.
    """
    pgpgin, pgpgout = get_page_io(vmem, sources)
    pswpin, pswpout = get_swap_io(sources)

    counters = {
        "pgpgin": pgpgin,
        "pgpgout": pgpgout,
        "pswpin": pswpin,
        "pswpout": pswpout,
        "pgfault": get_pgfault(vmem),
        "pgmajfault": get_pgmajfault(vmem),
        "pgalloc": get_pgalloc(vmem),
        "pgfree": get_pgfree(vmem),
        "pgrefill": get_pgrefill(vmem),
        "pgscan": get_pgscan(vmem),
        "pgscand": get_pgscand(vmem),
        "pgscank": get_pgscank(vmem),
        "pgsteal": get_pgsteal(vmem),
    }

    report = VmemReport(
        pagesize=pagesize if pagesize is not None else get_pagesize(),
        counters=counters,
        timing=Timing(emitted_at=emitted_at),
        meta=Meta(
            schema_version=SCHEMA_VERSION,
            probe_version=probe_version,
            sources={"vmstat": str(sources.vmstat), "stat": str(sources.stat)},
        ),
    )

    validate_report(report)
    return report
