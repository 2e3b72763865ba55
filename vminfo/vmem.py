"""
vminfo.vmem
AUTHOR: carter-vin

Virtual memory statistics (based on /proc/vmstat and /proc/stat)

Lifecycle:
- vmem_new() -> handle with refcount 1 and zeroed counters
- vmem_ref() shares, vmem_unref() drops; last unref returns None
- vmem_read() fills counters and rebuilds the legacy aggregates

Kernel differences:
- old kernels: pgalloc/pgrefill/pgscan/pgsteal as single totals,
  page and swap I/O only on /proc/stat "page" and "swap" lines
- newer kernels: per-zone counters only, I/O only in /proc/vmstat
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Optional

from vminfo.config import DEFAULT_SOURCES, ProcSources
from vminfo.fields import AGGREGATES, SCAN_DIRECT, SCAN_KSWAPD, VMSTAT_SCHEMA, VmemData, VmField
from vminfo.procparser import ProcUnavailableError, parse_table, read_summary_pair

PAGE_MARKER = "page"
SWAP_MARKER = "swap"


@dataclass
class VmemHandle:
    """
    Shared ownership of one VmemData
    - refcount: live holders
    - data: None once the last holder released it
    """

    refcount: int = 1
    data: Optional[VmemData] = field(default_factory=VmemData)


def get_pagesize() -> int:
    """
    Host memory page size in bytes
    """
    return os.sysconf("SC_PAGESIZE")


def vmem_new() -> VmemHandle:
    return VmemHandle()


def vmem_ref(vmem: Optional[VmemHandle]) -> Optional[VmemHandle]:
    """
    Take another reference; returns the same handle
    """
    if vmem is None:
        return None
    if vmem.data is None:
        raise ValueError("vmem handle already released")

    vmem.refcount += 1
    return vmem


def vmem_unref(vmem: Optional[VmemHandle]) -> Optional[VmemHandle]:
    """
    Drop a reference

    Returns the handle while holders remain, None after the last one
    """
    if vmem is None:
        return None

    vmem.refcount -= 1
    if vmem.refcount > 0:
        return vmem

    vmem.refcount = 0
    vmem.data = None
    return None


def vmem_read(vmem: Optional[VmemHandle], sources: ProcSources = DEFAULT_SOURCES) -> None:
    """
    Fill the handle with the values found in /proc/vmstat

    Each legacy aggregate missing from the source (read as 0) is rebuilt
    from its per-zone counters. A genuine 0 is indistinguishable from a
    missing key and is replaced by the sum too.
    """
    if vmem is None:
        return
    if vmem.data is None:
        raise ValueError("vmem handle already released")

    data = vmem.data
    data.reset_aggregates()

    parse_table(sources.vmstat, VMSTAT_SCHEMA, data, " ")

    for aggregate, components in AGGREGATES.items():
        if not data.get_field(aggregate):
            data.set_field(aggregate, data.sum_fields(components))


def vmem_get(vmem: Optional[VmemHandle], vm_field: VmField) -> int:
    """
    Read one counter; None or released handle reads as 0
    """
    if vmem is None or vmem.data is None:
        return 0
    return vmem.data.get_field(vm_field)


def _getter(vm_field: VmField) -> Callable[[Optional[VmemHandle]], int]:
    def getter(vmem: Optional[VmemHandle]) -> int:
        return vmem_get(vmem, vm_field)

    getter.__name__ = f"get_{vm_field.value}"
    getter.__doc__ = f"Value of {vm_field.value} (0 for a None handle)"
    return getter


get_pgalloc = _getter(VmField.PGALLOC)
get_pgfault = _getter(VmField.PGFAULT)
get_pgfree = _getter(VmField.PGFREE)
get_pgmajfault = _getter(VmField.PGMAJFAULT)
get_pgrefill = _getter(VmField.PGREFILL)
get_pgscan = _getter(VmField.PGSCAN)
get_pgsteal = _getter(VmField.PGSTEAL)
get_pswpin = _getter(VmField.PSWPIN)
get_pswpout = _getter(VmField.PSWPOUT)


def get_pgscand(vmem: Optional[VmemHandle]) -> int:
    """
    Pages scanned by direct reclaim, all zones
    """
    if vmem is None or vmem.data is None:
        return 0
    return vmem.data.sum_fields(SCAN_DIRECT)


def get_pgscank(vmem: Optional[VmemHandle]) -> int:
    """
    Pages scanned by kswapd, all zones
    """
    if vmem is None or vmem.data is None:
        return 0
    return vmem.data.sum_fields(SCAN_KSWAPD)


def get_page_io(
    vmem: Optional[VmemHandle], sources: ProcSources = DEFAULT_SOURCES
) -> tuple[int, int]:
    """
    Page-in / page-out totals

    Prefer the /proc/stat "page" line (old kernels). Otherwise use the
    counters already held by vmem; no fresh read happens here, so the
    caller must have called vmem_read() first.
    """
    try:
        pair = read_summary_pair(sources.stat, PAGE_MARKER)
    except ProcUnavailableError:
        # /proc/vmstat values are still a valid answer
        pair = None

    if pair is not None:
        return pair

    return vmem_get(vmem, VmField.PGPGIN), vmem_get(vmem, VmField.PGPGOUT)


def get_pgpgin(vmem: Optional[VmemHandle], sources: ProcSources = DEFAULT_SOURCES) -> int:
    return get_page_io(vmem, sources)[0]


def get_pgpgout(vmem: Optional[VmemHandle], sources: ProcSources = DEFAULT_SOURCES) -> int:
    return get_page_io(vmem, sources)[1]


def get_swap_io(sources: ProcSources = DEFAULT_SOURCES) -> tuple[int, int]:
    """
    Number of swap-ins and swap-outs since boot

    /proc/stat "swap" line first; Linux 2.5.40-bk4 and above only
    report them in /proc/vmstat, read through a private handle.

    Raises ProcUnavailableError when /proc/stat cannot be opened.
    """
    pair = read_summary_pair(sources.stat, SWAP_MARKER)
    if pair is not None:
        return pair

    vmem = vmem_new()
    try:
        vmem_read(vmem, sources)
        return get_pswpin(vmem), get_pswpout(vmem)
    finally:
        vmem_unref(vmem)
