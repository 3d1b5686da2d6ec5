"""Tests for base property collection and snapshot assembly."""

import platform
import sys

import pytest

from hostsnap.config import CollectorSettings
from hostsnap.core.collectors import (
    BasePropertyCollector,
    EnvironmentSnapshotCollector,
    MissingPropertyError,
    available_processors,
    choose_version,
    collect_environment_snapshot,
    system_properties,
)
from hostsnap.core.enrichers import ENRICHMENT_KEYS, NoOpEnricher
from hostsnap.core.hostname import HostnameResolver
from hostsnap.core.snapshot import EnvironmentSnapshot

BASE_KEYS = {
    "runtime.version",
    "host.availableProcessors",
    "os.name",
    "os.version",
    "os.arch",
}


def fixed_resolver(name):
    """Resolver that returns ``name`` without touching the network."""
    return HostnameResolver(get_name=lambda: name, lookup=lambda *args: None)


def failing_resolver():
    """Resolver whose lookup always fails."""
    def lookup(*args):
        raise OSError("Name or service not known")

    return HostnameResolver(get_name=lambda: "ghost", lookup=lookup)


class TestChooseVersion:
    """Test the longer-version heuristic."""

    def test_longer_alternate_wins(self):
        """Test the more descriptive alternate is chosen."""
        assert choose_version("1.8.0", "1.8.0_292-b10") == "1.8.0_292-b10"

    def test_shorter_alternate_loses(self):
        """Test a shorter alternate is ignored."""
        assert choose_version("1.8.0_292-b10", "1.8.0") == "1.8.0_292-b10"

    def test_equal_length_keeps_version(self):
        """Test ties keep the plain version."""
        assert choose_version("3.12.1", "3.12.2") == "3.12.1"

    def test_missing_alternate(self):
        """Test no alternate keeps the plain version."""
        assert choose_version("3.12.1", None) == "3.12.1"


class TestBasePropertyCollector:
    """Test runtime and OS property collection."""

    def test_collect_from_provider(self, linux_properties):
        """Test properties come from the injected provider."""
        collector = BasePropertyCollector(linux_properties, cpu_count=lambda: 8)
        props = collector.collect()

        assert props == {
            "runtime.version": "3.12.1 (main, Dec 8 2023) [GCC 12.2.0]",
            "host.availableProcessors": "8",
            "os.name": "Linux",
            "os.version": "6.1.0-18-amd64",
            "os.arch": "x86_64",
        }

    def test_version_heuristic_applied(self, linux_properties):
        """Test the longer of the two version strings is recorded."""
        linux_properties["python.version"] = "1.8.0"
        linux_properties["python.runtime.version"] = "1.8.0_292-b10"

        props = BasePropertyCollector(linux_properties, cpu_count=lambda: 1).collect()

        assert props["runtime.version"] == "1.8.0_292-b10"

    def test_alternate_version_optional(self, linux_properties):
        """Test the runtime version may be absent."""
        del linux_properties["python.runtime.version"]

        props = BasePropertyCollector(linux_properties, cpu_count=lambda: 1).collect()

        assert props["runtime.version"] == "3.12.1"

    @pytest.mark.parametrize("name", ["python.version", "os.name", "os.version", "os.arch"])
    def test_missing_required_property_is_fatal(self, linux_properties, name):
        """Test a missing required property raises instead of degrading."""
        del linux_properties[name]
        collector = BasePropertyCollector(linux_properties, cpu_count=lambda: 1)

        with pytest.raises(MissingPropertyError) as excinfo:
            collector.collect()

        assert excinfo.value.name == name
        assert name in str(excinfo.value)

    def test_empty_required_property_is_fatal(self, linux_properties):
        """Test an empty OS name counts as missing."""
        linux_properties["os.name"] = ""

        with pytest.raises(MissingPropertyError):
            BasePropertyCollector(linux_properties, cpu_count=lambda: 1).collect()

    def test_unknown_processor_count_is_fatal(self, linux_properties):
        """Test an undeterminable processor count raises."""
        collector = BasePropertyCollector(linux_properties, cpu_count=lambda: None)

        with pytest.raises(MissingPropertyError, match="host.availableProcessors"):
            collector.collect()

    def test_missing_property_error_is_key_error(self):
        """Test MissingPropertyError can be caught as KeyError."""
        assert issubclass(MissingPropertyError, KeyError)

    def test_default_provider_reads_real_system(self):
        """Test defaults read the live interpreter and OS."""
        props = BasePropertyCollector().collect()

        assert set(props) == BASE_KEYS
        assert props["os.name"] == platform.system()
        assert int(props["host.availableProcessors"]) >= 1
        assert props["runtime.version"].startswith(platform.python_version())


class TestSystemProperties:
    """Test the real runtime property store."""

    def test_keys(self):
        """Test every expected property is present."""
        props = system_properties()

        assert set(props) == {
            "python.version",
            "python.runtime.version",
            "os.name",
            "os.version",
            "os.arch",
        }

    def test_python_version_format(self):
        """Test the short version is Major.Minor.Micro."""
        expected = (
            f"{sys.version_info.major}."
            f"{sys.version_info.minor}."
            f"{sys.version_info.micro}"
        )
        assert system_properties()["python.version"] == expected

    def test_runtime_version_single_line(self):
        """Test the runtime version has no line breaks."""
        assert "\n" not in system_properties()["python.runtime.version"]

    def test_available_processors(self):
        """Test the processor count is positive."""
        assert available_processors() >= 1


class TestEnvironmentSnapshotCollector:
    """Test snapshot assembly."""

    def test_linux_snapshot_enriched(self, linux_properties, proc_settings):
        """Test base and enrichment keys appear together."""
        collector = EnvironmentSnapshotCollector(
            settings=proc_settings,
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=fixed_resolver("bench-01"),
        )
        snapshot = collector.collect()

        assert isinstance(snapshot, EnvironmentSnapshot)
        assert set(snapshot.properties) == BASE_KEYS | set(ENRICHMENT_KEYS)
        assert snapshot.properties["host.cpus"] == "4"
        assert snapshot.local_name == "bench-01"

    def test_unreadable_enrichment_keeps_base(self, linux_properties, missing_settings):
        """Test collection succeeds with only base keys when sources fail."""
        collector = EnvironmentSnapshotCollector(
            settings=missing_settings,
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=fixed_resolver("bench-01"),
        )
        snapshot = collector.collect()

        assert set(snapshot.properties) == BASE_KEYS
        assert not set(ENRICHMENT_KEYS) & set(snapshot.properties)

    def test_non_linux_skips_enrichment(self, linux_properties, proc_settings):
        """Test unsupported platforms get base keys only."""
        linux_properties["os.name"] = "Windows"
        collector = EnvironmentSnapshotCollector(
            settings=proc_settings,
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=fixed_resolver("bench-01"),
        )
        snapshot = collector.collect()

        assert set(snapshot.properties) == BASE_KEYS
        assert snapshot.properties["os.name"] == "Windows"

    def test_enricher_factory_receives_os_name(self, linux_properties):
        """Test the factory is called with the collected OS name."""
        calls = []

        def factory(os_name, settings):
            calls.append(os_name)
            return NoOpEnricher(settings)

        collector = EnvironmentSnapshotCollector(
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            enricher_factory=factory,
            hostname_resolver=fixed_resolver("bench-01"),
        )
        collector.collect()

        assert calls == ["Linux"]

    def test_hostname_failure_leaves_local_name_unset(
        self, linux_properties, proc_settings
    ):
        """Test an unresolvable host name gives local_name None."""
        collector = EnvironmentSnapshotCollector(
            settings=proc_settings,
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=failing_resolver(),
        )
        snapshot = collector.collect()

        assert snapshot.local_name is None
        assert set(snapshot.properties) == BASE_KEYS | set(ENRICHMENT_KEYS)

    def test_enrichment_disabled(self, linux_properties, proc_settings):
        """Test settings.enrich=False skips the enricher."""
        settings = proc_settings.model_copy(update={"enrich": False})
        collector = EnvironmentSnapshotCollector(
            settings=settings,
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=fixed_resolver("bench-01"),
        )

        assert set(collector.collect().properties) == BASE_KEYS

    def test_hostname_disabled(self, linux_properties, missing_settings):
        """Test settings.resolve_hostname=False never calls the resolver."""
        def get_name():
            raise AssertionError("resolver should not run")

        settings = missing_settings.model_copy(update={"resolve_hostname": False})
        collector = EnvironmentSnapshotCollector(
            settings=settings,
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=HostnameResolver(get_name=get_name),
        )

        assert collector.collect().local_name is None

    def test_fatal_base_error_propagates(self, linux_properties):
        """Test a missing base property aborts collection."""
        del linux_properties["os.arch"]
        collector = EnvironmentSnapshotCollector(
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=fixed_resolver("bench-01"),
        )

        with pytest.raises(MissingPropertyError):
            collector.collect()

    def test_each_call_builds_fresh_snapshot(self, linux_properties, proc_settings):
        """Test repeated calls do not share property state."""
        collector = EnvironmentSnapshotCollector(
            settings=proc_settings,
            base_collector=BasePropertyCollector(linux_properties, cpu_count=lambda: 4),
            hostname_resolver=fixed_resolver("bench-01"),
        )
        first = collector.collect()
        second = collector.collect()

        assert first == second
        assert first is not second
        assert first.properties is not second.properties

    def test_convenience_function(self):
        """Test collecting from the live system."""
        snapshot = collect_environment_snapshot(
            CollectorSettings(resolve_hostname=False)
        )

        assert BASE_KEYS <= set(snapshot.properties)
        assert list(snapshot.properties) == sorted(snapshot.properties)
