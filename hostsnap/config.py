"""Collector settings and YAML loading."""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class CollectorSettings(BaseModel):
    """Settings that control where and how the environment is read."""

    cpuinfo_path: Path = Field(
        default=Path("/proc/cpuinfo"), description="Linux CPU descriptor"
    )
    meminfo_path: Path = Field(
        default=Path("/proc/meminfo"), description="Linux memory descriptor"
    )
    reader_command: list[str] = Field(
        default_factory=lambda: ["/bin/cat"],
        description="External reader used when direct file access fails",
    )
    command_timeout: float = Field(
        default=5.0, description="Seconds to wait for an external reader"
    )
    prefer_command: bool = Field(
        default=False, description="Try the external reader before direct access"
    )
    enrich: bool = Field(default=True, description="Apply platform enrichment")
    resolve_hostname: bool = Field(
        default=True, description="Attempt local hostname resolution"
    )

    @field_validator("command_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is a positive number of seconds."""
        if v <= 0:
            raise ValueError(f"command_timeout must be positive, got {v}")
        return v

    @field_validator("reader_command")
    @classmethod
    def validate_reader_command(cls, v: list[str]) -> list[str]:
        """Validate the reader command names an executable."""
        if not v or not v[0]:
            raise ValueError("reader_command must name an executable")
        return v

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "CollectorSettings":
        """
        Build settings from a YAML document.

        An empty document gives the defaults.
        """
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("Settings YAML must be a mapping")
        return cls(**data)

    def to_yaml(self) -> str:
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)


def load_settings(path: Optional[Path] = None) -> CollectorSettings:
    """
    Load settings from a YAML file.

    Args:
        path: Settings file; None or a missing file yields the defaults

    Returns:
        CollectorSettings instance
    """
    if path is None:
        return CollectorSettings()

    path = Path(path)
    if not path.exists():
        logger.debug("Settings file %s not found, using defaults", path)
        return CollectorSettings()

    logger.debug("Loading settings from %s", path)
    return CollectorSettings.from_yaml(path.read_text(encoding="utf-8"))
