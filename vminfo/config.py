"""
vminfo.config
AUTHOR: carter-vin

Source file locations for the vmem reader

- Defaults point at the live /proc pseudo-files
- Env var overrides exist for fixtures and local testing
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PROC_VMSTAT = Path("/proc/vmstat")
PROC_STAT = Path("/proc/stat")

# Env var overrides:
# - point the probe at captured fixtures
# - run on hosts without /proc (dev laptops)
VMSTAT_PATH_ENV = "VMINFO_PROC_VMSTAT"
STAT_PATH_ENV = "VMINFO_PROC_STAT"


@dataclass(frozen=True)
class ProcSources:
    """
    Files read by one probe run
    - vmstat: per-key virtual memory table
    - stat: kernel summary table ("page" and "swap" lines on old kernels)
    """

    vmstat: Path = PROC_VMSTAT
    stat: Path = PROC_STAT

    @staticmethod
    def from_env() -> "ProcSources":
        vmstat = os.getenv(VMSTAT_PATH_ENV)
        stat = os.getenv(STAT_PATH_ENV)
        return ProcSources(
            vmstat=Path(vmstat) if vmstat else PROC_VMSTAT,
            stat=Path(stat) if stat else PROC_STAT,
        )


DEFAULT_SOURCES = ProcSources()
