"""
vminfo.fields
AUTHOR: carter-vin

Statistics record for /proc/vmstat

- VmField: every recognized key (member value == vmstat key name)
- VMSTAT_SCHEMA: parser schema built from VmField
- AGGREGATES: legacy totals and the per-zone counters that replaced them
- VmemData: flat record of unsigned counters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from vminfo.procparser import SchemaEntry


class VmField(str, Enum):
    ALLOCSTALL = "allocstall"  # times a page allocator ran direct reclaim
    KSWAPD_INODESTEAL = "kswapd_inodesteal"
    KSWAPD_STEAL = "kswapd_steal"  # pages reclaimed by kswapd
    NR_DIRTY = "nr_dirty"
    NR_MAPPED = "nr_mapped"
    NR_PAGE_TABLE_PAGES = "nr_page_table_pages"
    NR_PAGECACHE = "nr_pagecache"  # gone in 2.5.66+
    NR_REVERSE_MAPS = "nr_reverse_maps"  # gone
    NR_SLAB = "nr_slab"
    NR_UNSTABLE = "nr_unstable"
    NR_WRITEBACK = "nr_writeback"
    PAGEOUTRUN = "pageoutrun"  # times kswapd ran page reclaim
    PGACTIVATE = "pgactivate"
    PGALLOC = "pgalloc"  # gone (now per zone)
    PGALLOC_DMA = "pgalloc_dma"
    PGALLOC_HIGH = "pgalloc_high"
    PGALLOC_NORMAL = "pgalloc_normal"
    PGDEACTIVATE = "pgdeactivate"
    PGFAULT = "pgfault"  # major + minor
    PGFREE = "pgfree"
    PGINODESTEAL = "pginodesteal"
    PGMAJFAULT = "pgmajfault"
    PGPGIN = "pgpgin"  # kB read from disk
    PGPGOUT = "pgpgout"  # kB written to disk
    PGREFILL = "pgrefill"  # gone (now per zone)
    PGREFILL_DMA = "pgrefill_dma"
    PGREFILL_HIGH = "pgrefill_high"
    PGREFILL_NORMAL = "pgrefill_normal"
    PGROTATED = "pgrotated"
    PGSCAN = "pgscan"  # gone (now direct/kswapd per zone)
    PGSCAN_DIRECT_DMA = "pgscan_direct_dma"
    PGSCAN_DIRECT_HIGH = "pgscan_direct_high"
    PGSCAN_DIRECT_NORMAL = "pgscan_direct_normal"
    PGSCAN_KSWAPD_DMA = "pgscan_kswapd_dma"
    PGSCAN_KSWAPD_HIGH = "pgscan_kswapd_high"
    PGSCAN_KSWAPD_NORMAL = "pgscan_kswapd_normal"
    PGSTEAL = "pgsteal"  # gone (now per zone)
    PGSTEAL_DMA = "pgsteal_dma"
    PGSTEAL_HIGH = "pgsteal_high"
    PGSTEAL_NORMAL = "pgsteal_normal"
    PSWPIN = "pswpin"
    PSWPOUT = "pswpout"
    SLABS_SCANNED = "slabs_scanned"


VMSTAT_SCHEMA: tuple[SchemaEntry, ...] = tuple(
    SchemaEntry(key=vm_field.value, field=vm_field) for vm_field in VmField
)

SCAN_DIRECT = (
    VmField.PGSCAN_DIRECT_DMA,
    VmField.PGSCAN_DIRECT_HIGH,
    VmField.PGSCAN_DIRECT_NORMAL,
)

SCAN_KSWAPD = (
    VmField.PGSCAN_KSWAPD_DMA,
    VmField.PGSCAN_KSWAPD_HIGH,
    VmField.PGSCAN_KSWAPD_NORMAL,
)

AGGREGATES: dict[VmField, tuple[VmField, ...]] = {
    VmField.PGALLOC: (VmField.PGALLOC_DMA, VmField.PGALLOC_HIGH, VmField.PGALLOC_NORMAL),
    VmField.PGREFILL: (VmField.PGREFILL_DMA, VmField.PGREFILL_HIGH, VmField.PGREFILL_NORMAL),
    VmField.PGSCAN: SCAN_DIRECT + SCAN_KSWAPD,
    VmField.PGSTEAL: (VmField.PGSTEAL_DMA, VmField.PGSTEAL_HIGH, VmField.PGSTEAL_NORMAL),
}


@dataclass
class VmemData:
    """
    Raw and aggregate vmstat counters, all zero until read
    """

    values: dict[VmField, int] = field(
        default_factory=lambda: {vm_field: 0 for vm_field in VmField}
    )

    def set_field(self, vm_field: VmField, value: int) -> None:
        self.values[VmField(vm_field)] = value

    def get_field(self, vm_field: VmField) -> int:
        return self.values[VmField(vm_field)]

    def sum_fields(self, fields: tuple[VmField, ...]) -> int:
        return sum(self.values[f] for f in fields)

    def reset_aggregates(self) -> None:
        for aggregate in AGGREGATES:
            self.values[aggregate] = 0

    def as_dict(self) -> dict[str, Any]:
        # Keyed by vmstat name, schema order
        return {vm_field.value: self.values[vm_field] for vm_field in VmField}
