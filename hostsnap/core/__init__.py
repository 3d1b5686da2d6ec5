"""Core collection functionality for hostsnap."""

from .collectors import (
    BasePropertyCollector,
    EnvironmentSnapshotCollector,
    MissingPropertyError,
    collect_environment_snapshot,
)
from .snapshot import EnvironmentSnapshot

__all__ = [
    "BasePropertyCollector",
    "EnvironmentSnapshot",
    "EnvironmentSnapshotCollector",
    "MissingPropertyError",
    "collect_environment_snapshot",
]
