"""vminfo: virtual memory statistics from /proc/vmstat and /proc/stat."""

__version__ = "0.1.0"
