"""Select output artifacts by artifact type name."""

from __future__ import annotations

from collections.abc import Iterable

from artifact_viewers.mlmd.entities import Artifact, ArtifactType


def filter_artifact_uris_by_type(
    type_name: str,
    artifact_types: Iterable[ArtifactType],
    artifacts: Iterable[Artifact],
) -> list[str]:
    """Return non-empty URIs of artifacts whose type is named ``type_name``."""
    type_ids = {
        artifact_type.id
        for artifact_type in artifact_types
        if artifact_type.name == type_name
    }
    return [
        artifact.uri
        for artifact in artifacts
        if artifact.type_id in type_ids and artifact.uri
    ]


__all__ = ["filter_artifact_uris_by_type"]
