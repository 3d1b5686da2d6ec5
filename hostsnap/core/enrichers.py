"""Platform-specific enrichment of the base property set."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from ..config import CollectorSettings
from .kvparser import MultiMap
from .sources import (
    CommandSource,
    SourceResult,
    TextSource,
    default_source,
    read_key_value_source,
)
from .summarize import summarize

logger = logging.getLogger(__name__)

# Enrichment property names
HOST_CPUS = "host.cpus"
HOST_CPU_CORES = "host.cpu.cores"
HOST_CPU_NAMES = "host.cpu.names"
HOST_CPU_CACHESIZE = "host.cpu.cachesize"
HOST_MEMORY_PHYSICAL = "host.memory.physical"
HOST_MEMORY_SWAP = "host.memory.swap"

ENRICHMENT_KEYS = (
    HOST_CPUS,
    HOST_CPU_CORES,
    HOST_CPU_NAMES,
    HOST_CPU_CACHESIZE,
    HOST_MEMORY_PHYSICAL,
    HOST_MEMORY_SWAP,
)


class Platform(str, Enum):
    """Platforms recognized for enrichment."""

    LINUX = "Linux"
    DARWIN = "Darwin"
    OTHER = "other"


def detect_platform(os_name: str) -> Platform:
    """Map an OS name (as reported by ``platform.system()``) to a Platform."""
    for candidate in Platform:
        if candidate is not Platform.OTHER and candidate.value == os_name:
            return candidate
    return Platform.OTHER


class PlatformEnricher(ABC):
    """Adds platform-specific detail to a property set being built."""

    def __init__(self, settings: Optional[CollectorSettings] = None):
        self.settings = settings or CollectorSettings()

    @abstractmethod
    def enrich(self, properties: dict[str, str]) -> None:
        """Merge enrichment properties into ``properties`` in place."""


class NoOpEnricher(PlatformEnricher):
    """Enricher for platforms with nothing extra to report."""

    def enrich(self, properties: dict[str, str]) -> None:
        return None


def _put_summary(
    properties: dict[str, str], name: str, values: MultiMap, key: str
) -> None:
    # Fields the source does not carry are left out, not recorded as "none"
    if key in values:
        properties[name] = summarize(values, key)


def _log_result(label: str, result: SourceResult) -> None:
    if result.available:
        logger.debug("%s: %s (%s)", label, result.status.value, result.origin)
    else:
        logger.debug("%s unavailable (%s): %s", label, result.origin, result.error)


class LinuxEnricher(PlatformEnricher):
    """
    CPU and memory detail from /proc/cpuinfo and /proc/meminfo.

    Either file may be unreadable (containers, hardened kernels). An
    unreadable file simply contributes no properties.
    """

    def cpuinfo_source(self) -> TextSource:
        return default_source(self.settings.cpuinfo_path, self.settings)

    def meminfo_source(self) -> TextSource:
        return default_source(self.settings.meminfo_path, self.settings)

    def enrich(self, properties: dict[str, str]) -> None:
        cpu_result = read_key_value_source(self.cpuinfo_source())
        _log_result("cpuinfo", cpu_result)
        cpu_info = cpu_result.values

        if cpu_info.count("processor"):
            properties[HOST_CPUS] = str(cpu_info.count("processor"))
        _put_summary(properties, HOST_CPU_CORES, cpu_info, "cpu cores")
        _put_summary(properties, HOST_CPU_NAMES, cpu_info, "model name")
        _put_summary(properties, HOST_CPU_CACHESIZE, cpu_info, "cache size")

        mem_result = read_key_value_source(self.meminfo_source())
        _log_result("meminfo", mem_result)
        mem_info = mem_result.values

        _put_summary(properties, HOST_MEMORY_PHYSICAL, mem_info, "MemTotal")
        _put_summary(properties, HOST_MEMORY_SWAP, mem_info, "SwapTotal")


# sysctl name -> property name
DARWIN_SYSCTL_KEYS = {
    "hw.ncpu": HOST_CPUS,
    "hw.physicalcpu": HOST_CPU_CORES,
    "machdep.cpu.brand_string": HOST_CPU_NAMES,
    "hw.l2cachesize": HOST_CPU_CACHESIZE,
    "hw.memsize": HOST_MEMORY_PHYSICAL,
}


class DarwinEnricher(PlatformEnricher):
    """
    CPU and memory detail from ``sysctl`` on macOS.

    ``sysctl name ...`` prints ``name: value`` lines, so its output goes
    through the same parser as the Linux pseudo-files. Names the kernel does
    not know (e.g. machdep.cpu.brand_string on Apple silicon) are dropped.
    """

    def sysctl_source(self) -> TextSource:
        return CommandSource(
            ["sysctl", *DARWIN_SYSCTL_KEYS],
            timeout=self.settings.command_timeout,
            check=False,
        )

    def enrich(self, properties: dict[str, str]) -> None:
        result = read_key_value_source(self.sysctl_source())
        _log_result("sysctl", result)
        for sysctl_key, name in DARWIN_SYSCTL_KEYS.items():
            _put_summary(properties, name, result.values, sysctl_key)


ENRICHERS: dict[Platform, type[PlatformEnricher]] = {
    Platform.LINUX: LinuxEnricher,
    Platform.DARWIN: DarwinEnricher,
}


def enricher_for(
    os_name: str, settings: Optional[CollectorSettings] = None
) -> PlatformEnricher:
    """
    Return the enricher registered for ``os_name``.

    Unrecognized platforms get a NoOpEnricher.
    """
    platform_tag = detect_platform(os_name)
    enricher_cls = ENRICHERS.get(platform_tag, NoOpEnricher)
    logger.debug("Using %s for %s", enricher_cls.__name__, os_name)
    return enricher_cls(settings)
