"""Metadata store service interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

from artifact_viewers.mlmd.entities import Artifact, ArtifactType, Context, Event, Execution


class MetadataStoreService(ABC):
    """Request/response contract of the metadata store, one round trip per call."""

    @abstractmethod
    async def get_artifact_types(self) -> list[ArtifactType]:
        """Return every registered artifact type."""

    @abstractmethod
    async def get_context_by_type_and_name(
        self,
        type_name: str,
        context_name: str,
    ) -> Optional[Context]:
        """Return the context with this type and name, or None."""

    @abstractmethod
    async def get_executions_by_context(self, context_id: int) -> list[Execution]:
        """Return executions attributed to a context."""

    @abstractmethod
    async def get_events_by_execution_ids(
        self,
        execution_ids: Sequence[int],
    ) -> list[Event]:
        """Return input/output events of the given executions."""

    @abstractmethod
    async def get_artifacts_by_id(self, artifact_ids: Sequence[int]) -> list[Artifact]:
        """Return artifacts by id; unknown ids are omitted."""


__all__ = ["MetadataStoreService"]
