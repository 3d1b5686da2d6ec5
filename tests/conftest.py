"""Pytest configuration and shared fixtures for hostsnap tests."""

import pytest

from hostsnap.config import CollectorSettings

CPUINFO_TEXT = """\
processor\t: 0
vendor_id\t: GenuineIntel
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
cache size\t: 35840 KB
cpu cores\t: 2
flags\t\t: fpu vme de pse
power management:

processor\t: 1
vendor_id\t: GenuineIntel
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
cache size\t: 35840 KB
cpu cores\t: 2
power management:

processor\t: 2
vendor_id\t: GenuineIntel
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
cache size\t: 35840 KB
cpu cores\t: 2

processor\t: 3
vendor_id\t: GenuineIntel
model name\t: Intel(R) Xeon(R) CPU E5-2680 v4 @ 2.40GHz
cache size\t: 35840 KB
cpu cores\t: 2
"""

MEMINFO_TEXT = """\
MemTotal:       16318412 kB
MemFree:         1201332 kB
MemAvailable:    9412240 kB
SwapTotal:       2097148 kB
SwapFree:        2097148 kB
"""


@pytest.fixture
def proc_files(tmp_path):
    """
    Write fake cpuinfo/meminfo files.

    Returns a (cpuinfo_path, meminfo_path) tuple.
    """
    cpuinfo = tmp_path / "cpuinfo"
    meminfo = tmp_path / "meminfo"
    cpuinfo.write_text(CPUINFO_TEXT)
    meminfo.write_text(MEMINFO_TEXT)
    return cpuinfo, meminfo


@pytest.fixture
def proc_settings(proc_files):
    """Settings pointing the Linux enricher at the fake proc files."""
    cpuinfo, meminfo = proc_files
    return CollectorSettings(cpuinfo_path=cpuinfo, meminfo_path=meminfo)


@pytest.fixture
def missing_settings(tmp_path):
    """Settings whose proc files and reader command do not exist."""
    return CollectorSettings(
        cpuinfo_path=tmp_path / "no-cpuinfo",
        meminfo_path=tmp_path / "no-meminfo",
        reader_command=[str(tmp_path / "no-such-reader")],
    )


@pytest.fixture
def linux_properties():
    """A fake runtime property store for a Linux host."""
    return {
        "python.version": "3.12.1",
        "python.runtime.version": "3.12.1 (main, Dec 8 2023) [GCC 12.2.0]",
        "os.name": "Linux",
        "os.version": "6.1.0-18-amd64",
        "os.arch": "x86_64",
    }
