"""In-memory metadata store backed by a JSON snapshot."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence
import json
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from artifact_viewers.errors import ValidationError
from artifact_viewers.mlmd.entities import (
    Artifact,
    ArtifactType,
    Context,
    Event,
    EventType,
    Execution,
    Value,
)
from artifact_viewers.mlmd.service import MetadataStoreService


def _as_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError(f"{label} must be a mapping, got {type(value)!r}.")
    return value


def _as_list(value: Any, label: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValidationError(f"{label} must be a list.")
    return list(value)


def _as_int(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be an int, got {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{label} must be an int, got {value!r}.") from exc


def _parse_properties(value: Any, label: str) -> dict[str, Value]:
    properties: dict[str, Value] = {}
    for name, raw in _as_mapping(value, label).items():
        try:
            properties[str(name)] = Value.of(raw)
        except TypeError as exc:
            raise ValidationError(f"{label}.{name}: {exc}") from exc
    return properties


def _parse_event_type(value: Any, label: str) -> EventType:
    try:
        return EventType(str(value).upper())
    except ValueError as exc:
        raise ValidationError(f"{label} has unknown event type {value!r}.") from exc


class InMemoryMetadataStore(MetadataStoreService):
    """Serve metadata store queries from in-process lists.

    ``calls`` counts requests per operation so callers can check which
    queries a traversal actually issued.
    """

    def __init__(
        self,
        *,
        artifact_types: Iterable[ArtifactType] = (),
        contexts: Iterable[Context] = (),
        executions: Iterable[Execution] = (),
        events: Iterable[Event] = (),
        artifacts: Iterable[Artifact] = (),
        attributions: Optional[Mapping[int, Sequence[int]]] = None,
    ) -> None:
        self.artifact_types = list(artifact_types)
        self.contexts = list(contexts)
        self.executions = list(executions)
        self.events = list(events)
        self.artifacts = list(artifacts)
        self.attributions = {
            int(context_id): [int(item) for item in execution_ids]
            for context_id, execution_ids in (attributions or {}).items()
        }
        self.calls: Counter[str] = Counter()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "InMemoryMetadataStore":
        payload = _as_mapping(payload, "snapshot")
        artifact_types = []
        for index, entry in enumerate(_as_list(payload.get("artifact_types"), "artifact_types")):
            item = _as_mapping(entry, f"artifact_types[{index}]")
            artifact_types.append(
                ArtifactType(
                    id=_as_int(item.get("id"), f"artifact_types[{index}].id"),
                    name=str(item.get("name", "")),
                )
            )

        contexts: list[Context] = []
        attributions: dict[int, list[int]] = {}
        for index, entry in enumerate(_as_list(payload.get("contexts"), "contexts")):
            item = _as_mapping(entry, f"contexts[{index}]")
            context_id = _as_int(item.get("id"), f"contexts[{index}].id")
            contexts.append(
                Context(
                    id=context_id,
                    name=str(item.get("name", "")),
                    type_name=str(item.get("type", "")),
                )
            )
            attributions[context_id] = [
                _as_int(value, f"contexts[{index}].execution_ids")
                for value in _as_list(item.get("execution_ids"), f"contexts[{index}].execution_ids")
            ]

        executions = []
        for index, entry in enumerate(_as_list(payload.get("executions"), "executions")):
            item = _as_mapping(entry, f"executions[{index}]")
            executions.append(
                Execution(
                    id=_as_int(item.get("id"), f"executions[{index}].id"),
                    properties=_parse_properties(
                        item.get("properties"), f"executions[{index}].properties"
                    ),
                )
            )

        events = []
        for index, entry in enumerate(_as_list(payload.get("events"), "events")):
            item = _as_mapping(entry, f"events[{index}]")
            artifact_id = item.get("artifact_id")
            events.append(
                Event(
                    type=_parse_event_type(item.get("type"), f"events[{index}]"),
                    artifact_id=(
                        None
                        if artifact_id is None
                        else _as_int(artifact_id, f"events[{index}].artifact_id")
                    ),
                    execution_id=_as_int(
                        item.get("execution_id"), f"events[{index}].execution_id"
                    ),
                )
            )

        artifacts = []
        for index, entry in enumerate(_as_list(payload.get("artifacts"), "artifacts")):
            item = _as_mapping(entry, f"artifacts[{index}]")
            artifacts.append(
                Artifact(
                    id=_as_int(item.get("id"), f"artifacts[{index}].id"),
                    type_id=_as_int(item.get("type_id"), f"artifacts[{index}].type_id"),
                    uri=str(item.get("uri") or ""),
                )
            )

        return cls(
            artifact_types=artifact_types,
            contexts=contexts,
            executions=executions,
            events=events,
            artifacts=artifacts,
            attributions=attributions,
        )

    @classmethod
    def from_snapshot(cls, path: Union[str, Path]) -> "InMemoryMetadataStore":
        path = Path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ValidationError(f"Failed to load metadata snapshot {path}: {exc}") from exc
        return cls.from_dict(payload)

    async def get_artifact_types(self) -> list[ArtifactType]:
        self.calls["get_artifact_types"] += 1
        return list(self.artifact_types)

    async def get_context_by_type_and_name(
        self,
        type_name: str,
        context_name: str,
    ) -> Optional[Context]:
        self.calls["get_context_by_type_and_name"] += 1
        for context in self.contexts:
            if context.type_name == type_name and context.name == context_name:
                return context
        return None

    async def get_executions_by_context(self, context_id: int) -> list[Execution]:
        self.calls["get_executions_by_context"] += 1
        wanted = set(self.attributions.get(context_id, ()))
        return [execution for execution in self.executions if execution.id in wanted]

    async def get_events_by_execution_ids(
        self,
        execution_ids: Sequence[int],
    ) -> list[Event]:
        self.calls["get_events_by_execution_ids"] += 1
        wanted = set(execution_ids)
        return [event for event in self.events if event.execution_id in wanted]

    async def get_artifacts_by_id(self, artifact_ids: Sequence[int]) -> list[Artifact]:
        self.calls["get_artifacts_by_id"] += 1
        by_id = {artifact.id: artifact for artifact in self.artifacts}
        return [by_id[artifact_id] for artifact_id in artifact_ids if artifact_id in by_id]


__all__ = ["InMemoryMetadataStore"]
