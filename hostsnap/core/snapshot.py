"""The environment snapshot record and its serialization."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class EnvironmentSnapshot(BaseModel):
    """
    One immutable description of the host a run executed on.

    ``properties`` is a read-only mapping that iterates in lexicographic key
    order, whatever order the values were collected in.
    """

    model_config = ConfigDict(frozen=True)

    properties: Mapping[str, str] = Field(
        default_factory=dict, description="Property name to value, sorted by name"
    )
    local_name: Optional[str] = Field(
        None, description="Resolved local host name, if resolution succeeded"
    )

    @field_validator("properties")
    @classmethod
    def sort_properties(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        """Freeze properties into a sorted, read-only mapping."""
        return MappingProxyType({key: v[key] for key in sorted(v)})

    @field_serializer("properties")
    def serialize_properties(self, v: Mapping[str, str]) -> dict[str, str]:
        return dict(v)

    def to_yaml(self) -> str:
        """
        Serialize snapshot to YAML string.

        Returns:
            YAML string representation
        """
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def to_json(self, indent: int = 2) -> str:
        """
        Serialize snapshot to JSON string.

        Args:
            indent: JSON indentation level

        Returns:
            JSON string representation
        """
        return self.model_dump_json(indent=indent)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "EnvironmentSnapshot":
        data = yaml.safe_load(yaml_str)
        if not isinstance(data, dict):
            raise ValueError("Snapshot YAML must be a mapping")
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "EnvironmentSnapshot":
        return cls.model_validate_json(json_str)
