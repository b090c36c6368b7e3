"""Metadata store traversal and artifact rendering."""

from artifact_viewers.mlmd.classifier import filter_artifact_uris_by_type
from artifact_viewers.mlmd.entities import (
    Artifact,
    ArtifactType,
    Context,
    Event,
    EventType,
    Execution,
    Value,
)
from artifact_viewers.mlmd.memory import InMemoryMetadataStore
from artifact_viewers.mlmd.resolver import (
    MlmdGraphResolver,
    Traversal,
    TraversalState,
    context_name_for_pod,
)
from artifact_viewers.mlmd.service import MetadataStoreService

__all__ = [
    "Artifact",
    "ArtifactType",
    "Context",
    "Event",
    "EventType",
    "Execution",
    "Value",
    "InMemoryMetadataStore",
    "MetadataStoreService",
    "MlmdGraphResolver",
    "Traversal",
    "TraversalState",
    "context_name_for_pod",
    "filter_artifact_uris_by_type",
]
