"""Read-only views over metadata store entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union


class EventType(str, Enum):
    UNKNOWN = "UNKNOWN"
    DECLARED_OUTPUT = "DECLARED_OUTPUT"
    DECLARED_INPUT = "DECLARED_INPUT"
    INPUT = "INPUT"
    OUTPUT = "OUTPUT"
    INTERNAL_INPUT = "INTERNAL_INPUT"
    INTERNAL_OUTPUT = "INTERNAL_OUTPUT"


@dataclass(frozen=True)
class Value:
    """A property value; exactly one of the fields is normally set."""

    string_value: Optional[str] = None
    int_value: Optional[int] = None
    double_value: Optional[float] = None

    @classmethod
    def of(cls, raw: Union["Value", Mapping[str, Any], str, int, float]) -> "Value":
        if isinstance(raw, Value):
            return raw
        if isinstance(raw, Mapping):
            return cls(
                string_value=raw.get("string_value"),
                int_value=raw.get("int_value"),
                double_value=raw.get("double_value"),
            )
        if isinstance(raw, bool):
            raise TypeError("Boolean property values are not supported.")
        if isinstance(raw, str):
            return cls(string_value=raw)
        if isinstance(raw, int):
            return cls(int_value=raw)
        if isinstance(raw, float):
            return cls(double_value=raw)
        raise TypeError(f"Unsupported property value: {raw!r}")

    def get_string_value(self) -> str:
        return self.string_value or ""


@dataclass(frozen=True)
class ArtifactType:
    id: int
    name: str


@dataclass(frozen=True)
class Context:
    id: Optional[int]
    name: str = ""
    type_name: str = ""


@dataclass(frozen=True)
class Execution:
    id: Optional[int]
    properties: Mapping[str, Value] = field(default_factory=dict)

    def get_property(self, name: str) -> Optional[Value]:
        return self.properties.get(name)


@dataclass(frozen=True)
class Event:
    type: EventType
    artifact_id: Optional[int] = None
    execution_id: Optional[int] = None


@dataclass(frozen=True)
class Artifact:
    id: int
    type_id: int
    uri: str = ""


__all__ = [
    "EventType",
    "Value",
    "ArtifactType",
    "Context",
    "Execution",
    "Event",
    "Artifact",
]
