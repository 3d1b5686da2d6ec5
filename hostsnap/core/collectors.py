"""Collectors that assemble an EnvironmentSnapshot."""

import logging
import os
import platform
import sys
from collections.abc import Callable, Mapping
from typing import Optional

from ..config import CollectorSettings
from .enrichers import PlatformEnricher, enricher_for
from .hostname import HostnameResolver
from .snapshot import EnvironmentSnapshot

logger = logging.getLogger(__name__)

# Names in the runtime property store
PYTHON_VERSION = "python.version"
PYTHON_RUNTIME_VERSION = "python.runtime.version"
OS_NAME = "os.name"
OS_VERSION = "os.version"
OS_ARCH = "os.arch"

# Names in the snapshot
RUNTIME_VERSION = "runtime.version"
HOST_AVAILABLE_PROCESSORS = "host.availableProcessors"

# Anything that maps property names to strings can stand in for the real store
PropertyProvider = Mapping[str, str]


class MissingPropertyError(KeyError):
    """A property every supported runtime provides was not found."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Required runtime property is missing: {self.name}"


def system_properties() -> dict[str, str]:
    """
    Read the process-wide runtime properties.

    ``python.runtime.version`` is the full build string from ``sys.version``
    folded onto one line; ``python.version`` is the bare X.Y.Z version.
    """
    return {
        PYTHON_VERSION: platform.python_version(),
        PYTHON_RUNTIME_VERSION: " ".join(sys.version.split()),
        OS_NAME: platform.system(),
        OS_VERSION: platform.release(),
        OS_ARCH: platform.machine(),
    }


def available_processors() -> Optional[int]:
    """Logical processors this process may run on (None if unknown)."""
    if hasattr(os, "sched_getaffinity"):
        try:
            return len(os.sched_getaffinity(0))
        except OSError:
            pass
    return os.cpu_count()


def choose_version(version: str, alternate: Optional[str]) -> str:
    """
    Pick the more descriptive of two version strings.

    Length stands in for descriptiveness: the alternate wins only when it is
    strictly longer.

    Examples:
        >>> choose_version("1.8.0", "1.8.0_292-b10")
        '1.8.0_292-b10'
        >>> choose_version("3.12.1", None)
        '3.12.1'
    """
    if alternate is not None and len(alternate) > len(version):
        return alternate
    return version


class BasePropertyCollector:
    """
    Collects runtime version, processor count and OS identity.

    Pure in-process introspection. A missing property here means the
    runtime is broken or unsupported, so it raises MissingPropertyError
    instead of producing a partial result.
    """

    def __init__(
        self,
        provider: Optional[PropertyProvider] = None,
        cpu_count: Optional[Callable[[], Optional[int]]] = None,
    ):
        """
        Initialize base collector.

        Args:
            provider: Property store to read from (default: system_properties())
            cpu_count: Callable returning the available processor count
                (default: available_processors)
        """
        self.provider = provider
        self.cpu_count = cpu_count or available_processors

    def _require(self, provider: PropertyProvider, name: str) -> str:
        value = provider.get(name)
        if not value:
            raise MissingPropertyError(name)
        return value

    def collect(self) -> dict[str, str]:
        provider = self.provider if self.provider is not None else system_properties()

        version = choose_version(
            self._require(provider, PYTHON_VERSION),
            provider.get(PYTHON_RUNTIME_VERSION) or None,
        )

        processors = self.cpu_count()
        if processors is None:
            raise MissingPropertyError(HOST_AVAILABLE_PROCESSORS)

        return {
            RUNTIME_VERSION: version,
            HOST_AVAILABLE_PROCESSORS: str(processors),
            OS_NAME: self._require(provider, OS_NAME),
            OS_VERSION: self._require(provider, OS_VERSION),
            OS_ARCH: self._require(provider, OS_ARCH),
        }


EnricherFactory = Callable[[str, Optional[CollectorSettings]], PlatformEnricher]


class EnvironmentSnapshotCollector:
    """
    Orchestrates base collection, platform enrichment and hostname lookup.

    Holds only configuration; every collect() call builds a fresh property
    dict, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        settings: Optional[CollectorSettings] = None,
        base_collector: Optional[BasePropertyCollector] = None,
        enricher_factory: Optional[EnricherFactory] = None,
        hostname_resolver: Optional[HostnameResolver] = None,
    ):
        self.settings = settings or CollectorSettings()
        self.base_collector = base_collector or BasePropertyCollector()
        self.enricher_factory = enricher_factory or enricher_for
        self.hostname_resolver = hostname_resolver or HostnameResolver()

    def collect(self) -> EnvironmentSnapshot:
        properties = self.base_collector.collect()
        os_name = properties[OS_NAME]

        if self.settings.enrich:
            enricher = self.enricher_factory(os_name, self.settings)
            enricher.enrich(properties)
        else:
            logger.debug("Platform enrichment disabled")

        local_name = None
        if self.settings.resolve_hostname:
            local_name = self.hostname_resolver.resolve()

        logger.debug(
            "Collected %d properties (local name: %s)", len(properties), local_name
        )
        return EnvironmentSnapshot(properties=properties, local_name=local_name)


def collect_environment_snapshot(
    settings: Optional[CollectorSettings] = None,
) -> EnvironmentSnapshot:
    """Convenience function to collect an environment snapshot."""
    return EnvironmentSnapshotCollector(settings=settings).collect()
