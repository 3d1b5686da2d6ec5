"""Formatting utilities for hostsnap."""

import re
from typing import Optional

from ..core.snapshot import EnvironmentSnapshot

# Properties whose values are /proc/meminfo-style "<n> kB" figures
MEMORY_KEYS = ("host.memory.physical", "host.memory.swap")


def format_size(bytes_: float) -> str:
    """Format bytes as human-readable size.

    Args:
        bytes_: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 GB", "42.3 MB")

    Examples:
        >>> format_size(0)
        '0 B'
        >>> format_size(1536)
        '1.5 KB'
        >>> format_size(1073741824)
        '1.0 GB'
    """
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if bytes_ < 1024.0:
            if unit == "B":
                return f"{int(bytes_)} {unit}"
            return f"{bytes_:.1f} {unit}"
        bytes_ /= 1024.0
    return f"{bytes_:.1f} PB"


def parse_kb_figure(value: str) -> Optional[int]:
    """Parse a meminfo figure such as '16318412 kB' into bytes.

    A bare number (as sysctl reports hw.memsize) is taken as bytes.
    Anything else, including multi-value summaries, returns None.

    Examples:
        >>> parse_kb_figure("2048 kB")
        2097152
        >>> parse_kb_figure("17179869184")
        17179869184
        >>> parse_kb_figure("{1 kB | 2 kB}") is None
        True
    """
    match = re.match(r"^\s*(\d+)\s*(kB)?\s*$", value, re.IGNORECASE)
    if not match:
        return None
    number, unit = match.groups()
    return int(number) * 1024 if unit else int(number)


def format_properties(snapshot: EnvironmentSnapshot) -> str:
    """Render a snapshot as aligned ``name  value`` lines.

    Memory figures get a human-readable size appended. The local name is
    always the last line, shown as "(unresolved)" when missing.
    """
    rows = list(snapshot.properties.items())
    rows.append(("localName", snapshot.local_name or "(unresolved)"))
    width = max(len(name) for name, _ in rows)

    lines = []
    for name, value in rows:
        if name in MEMORY_KEYS:
            size = parse_kb_figure(value)
            if size is not None:
                value = f"{value} ({format_size(size)})"
        lines.append(f"{name.ljust(width)}  {value}")
    return "\n".join(lines)
