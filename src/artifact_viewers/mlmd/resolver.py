"""Discover and render a pod's output artifacts from the metadata store.

Traversal runs four strictly ordered stages::

    INIT -> HAVE_TYPES -> HAVE_CONTEXT -> HAVE_EXECUTION -> HAVE_ARTIFACTS

Each stage either advances with its payload or stops the traversal with an
empty result when the metadata store simply has nothing for this pod (no
types, no run context, no finished execution, no outputs). Transport
failures are wrapped in ``MetadataStoreError`` naming the failed request and
propagate to the caller, as do malformed pod names and rendering failures.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, TypeVar

from artifact_viewers.errors import (
    ArtifactViewerError,
    MetadataStoreError,
    PodNameError,
    ValidationError,
)
from artifact_viewers.logging_utils import Reporter, resolve_reporter
from artifact_viewers.mlmd.classifier import filter_artifact_uris_by_type
from artifact_viewers.mlmd.entities import (
    Artifact,
    ArtifactType,
    Context,
    EventType,
    Execution,
)
from artifact_viewers.mlmd.service import MetadataStoreService
from artifact_viewers.registry import Registry, default_registry
from artifact_viewers.viewers import HTMLViewerConfig
from artifact_viewers.visualization import VisualizationService

DEFAULT_CONTEXT_TYPE = "run"
DEFAULT_POD_NAME_PROPERTY = "kfp_pod_name"
DEFAULT_STATE_PROPERTY = "state"
DEFAULT_COMPLETE_STATE = "complete"

ProgressCallback = Callable[[int], None]

_LOGGER_NAME = "artifact_viewers.mlmd"
_T = TypeVar("_T")


def _load_builtin_recipes() -> None:
    import artifact_viewers.mlmd.recipes  # noqa: F401


class TraversalState(str, Enum):
    INIT = "init"
    HAVE_TYPES = "have_types"
    HAVE_CONTEXT = "have_context"
    HAVE_EXECUTION = "have_execution"
    HAVE_ARTIFACTS = "have_artifacts"


@dataclass(frozen=True)
class Traversal:
    """How far the traversal got and what each completed stage produced."""

    state: TraversalState = TraversalState.INIT
    artifact_types: tuple[ArtifactType, ...] = ()
    context: Optional[Context] = None
    execution: Optional[Execution] = None
    artifacts: tuple[Artifact, ...] = ()

    @property
    def complete(self) -> bool:
        return self.state is TraversalState.HAVE_ARTIFACTS


def context_name_for_pod(pod_name: str) -> str:
    """Derive the run context name from a pod name.

    Pod names look like ``<pipeline>-<workflow>-<node>``; every component of
    one run shares the ``<pipeline>-<workflow>`` prefix.
    """
    if not isinstance(pod_name, str):
        raise PodNameError(f"Pod name must be a string, got {type(pod_name).__name__}.")
    parts = pod_name.split("-")
    if len(parts) < 3:
        raise PodNameError(
            f"Pod name {pod_name!r} has fewer than 3 parts",
            context={"pod_name": pod_name},
        )
    pipeline_name = "_".join(parts[:-2])
    run_id = "-".join(parts[:-1])
    return f"{pipeline_name}.{run_id}"


def _noop_progress(_progress: int) -> None:
    return None


class MlmdGraphResolver:
    """Resolve a pod's output artifacts into HTML viewers."""

    def __init__(
        self,
        store: MetadataStoreService,
        visualizations: VisualizationService,
        *,
        reporter: Optional[Reporter] = None,
        registry: Optional[Registry] = None,
        context_type: str = DEFAULT_CONTEXT_TYPE,
        pod_name_property: str = DEFAULT_POD_NAME_PROPERTY,
        state_property: str = DEFAULT_STATE_PROPERTY,
        complete_state: str = DEFAULT_COMPLETE_STATE,
    ) -> None:
        self.store = store
        self.visualizations = visualizations
        self.reporter = resolve_reporter(reporter, _LOGGER_NAME)
        if registry is None:
            _load_builtin_recipes()
            registry = default_registry()
        self.registry = registry
        self.context_type = context_type
        self.pod_name_property = pod_name_property
        self.state_property = state_property
        self.complete_state = complete_state

    async def _request(self, operation: str, stage: str, call: Awaitable[_T]) -> _T:
        try:
            return await call
        except ArtifactViewerError:
            raise
        except Exception as exc:
            raise MetadataStoreError(
                f"Failed to {operation}: {exc}",
                stage=stage,
            ) from exc

    async def fetch_artifact_types(self) -> list[ArtifactType]:
        return await self._request(
            "get_artifact_types", "catalog", self.store.get_artifact_types()
        )

    async def find_context(self, pod_name: str) -> Optional[Context]:
        context_name = context_name_for_pod(pod_name)
        return await self._request(
            "get_context_by_type_and_name",
            "context",
            self.store.get_context_by_type_and_name(self.context_type, context_name),
        )

    def _property_string(self, execution: Execution, name: str) -> Optional[str]:
        value = execution.get_property(name)
        if value is None:
            return None
        return value.get_string_value()

    async def find_execution(self, pod_name: str, context: Context) -> Optional[Execution]:
        if not context.id:
            raise ValidationError("Context must have an ID")
        executions = await self._request(
            "get_executions_by_context",
            "execution",
            self.store.get_executions_by_context(context.id),
        )
        found = next(
            (
                execution
                for execution in executions
                if self._property_string(execution, self.pod_name_property) == pod_name
            ),
            None,
        )
        if found is None:
            return None
        if self._property_string(found, self.state_property) != self.complete_state:
            return None
        return found

    async def fetch_output_artifacts(self, execution: Execution) -> list[Artifact]:
        if not execution.id:
            raise ValidationError("Execution must have an ID")
        events = await self._request(
            "get_events_by_execution_ids",
            "artifacts",
            self.store.get_events_by_execution_ids([execution.id]),
        )
        artifact_ids = [
            event.artifact_id
            for event in events
            if event.type is EventType.OUTPUT and event.artifact_id
        ]
        return await self._request(
            "get_artifacts_by_id",
            "artifacts",
            self.store.get_artifacts_by_id(artifact_ids),
        )

    async def traverse(
        self,
        pod_name: str,
        on_progress: ProgressCallback = _noop_progress,
    ) -> Traversal:
        context_name_for_pod(pod_name)
        traversal = Traversal()

        on_progress(10)
        artifact_types = await self.fetch_artifact_types()
        if not artifact_types:
            self.reporter.report("debug", "Metadata store has no artifact types.")
            return traversal
        traversal = Traversal(TraversalState.HAVE_TYPES, tuple(artifact_types))
        on_progress(20)

        context = await self.find_context(pod_name)
        if context is None:
            self.reporter.report("debug", f"No {self.context_type!r} context for pod {pod_name}.")
            return traversal
        traversal = Traversal(TraversalState.HAVE_CONTEXT, traversal.artifact_types, context)
        on_progress(40)

        execution = await self.find_execution(pod_name, context)
        if execution is None:
            self.reporter.report("debug", f"No complete execution for pod {pod_name}.")
            return traversal
        traversal = Traversal(
            TraversalState.HAVE_EXECUTION, traversal.artifact_types, context, execution
        )
        on_progress(60)

        artifacts = await self.fetch_output_artifacts(execution)
        if not artifacts:
            self.reporter.report("debug", f"Execution {execution.id} has no output artifacts.")
            return traversal
        traversal = Traversal(
            TraversalState.HAVE_ARTIFACTS,
            traversal.artifact_types,
            context,
            execution,
            tuple(artifacts),
        )
        on_progress(80)
        return traversal

    def plan_viewers(self, traversal: Traversal) -> list[Awaitable[HTMLViewerConfig]]:
        pending: list[Awaitable[HTMLViewerConfig]] = []
        for type_name in self.registry.list("artifact"):
            recipe: Any = self.registry.get("artifact", type_name)
            for uri in filter_artifact_uris_by_type(
                type_name, traversal.artifact_types, traversal.artifacts
            ):
                pending.extend(recipe(self.visualizations, uri))
        return pending

    async def resolve(
        self,
        pod_name: str,
        on_progress: ProgressCallback = _noop_progress,
    ) -> list[HTMLViewerConfig]:
        traversal = await self.traverse(pod_name, on_progress)
        if not traversal.complete:
            return []
        return list(await asyncio.gather(*self.plan_viewers(traversal)))


__all__ = [
    "DEFAULT_CONTEXT_TYPE",
    "DEFAULT_POD_NAME_PROPERTY",
    "DEFAULT_STATE_PROPERTY",
    "DEFAULT_COMPLETE_STATE",
    "ProgressCallback",
    "TraversalState",
    "Traversal",
    "context_name_for_pod",
    "MlmdGraphResolver",
]
