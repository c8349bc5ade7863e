from __future__ import annotations

from datetime import datetime
from typing import Optional

_UNITS = "KMGTPE"


def format_file_size(size: Optional[int]) -> str:
    """Human-readable size using 1024-based units (e.g. 1536 -> '1.5 KB')."""
    if size is None:
        return "-"
    if size < 1024:
        return f"{size} B"

    value = float(size)
    for unit in _UNITS:
        value /= 1024
        if value < 1024 or unit == _UNITS[-1]:
            return f"{value:.1f} {unit}B"
    raise AssertionError("unreachable")


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")
