"""hostsnap - Environment snapshots for benchmark and run reports."""

__version__ = "0.1.0"

from .core.collectors import collect_environment_snapshot
from .core.snapshot import EnvironmentSnapshot

__all__ = ["EnvironmentSnapshot", "collect_environment_snapshot"]
