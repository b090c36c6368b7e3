"""Resolve an output metadata document into viewer descriptors.

The document is optional: a missing, unreadable or malformed file yields an
empty list. Each plot record is then built independently and concurrently;
a record whose builder fails is reported and dropped, and the remaining
descriptors keep the document order.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional, Union

from artifact_viewers.errors import MetadataError
from artifact_viewers.logging_utils import Reporter, get_user_message, resolve_reporter
from artifact_viewers.metadata import OutputMetadata, PlotMetadata
from artifact_viewers.registry import Registry, resolve_plot_builder
from artifact_viewers.storage import FileReader, StoragePath, parse_storage_path
from artifact_viewers.tabular import TabularDataFetcher
from artifact_viewers.viewers import ViewerConfig

_LOGGER_NAME = "artifact_viewers.outputs"


def _load_builtin_builders() -> None:
    import artifact_viewers.builders  # noqa: F401


class MetadataDocumentLoader:
    """Read an output metadata document and return its plot records."""

    def __init__(self, reader: FileReader, *, reporter: Optional[Reporter] = None) -> None:
        self.reader = reader
        self.reporter = resolve_reporter(reporter, _LOGGER_NAME)

    async def load(self, path: Union[str, StoragePath]) -> list[Any]:
        try:
            location = path if isinstance(path, StoragePath) else parse_storage_path(path)
            content = await self.reader.read(location)
        except Exception as exc:
            self.reporter.report(
                "error", f"Error loading run outputs: {get_user_message(exc)}"
            )
            return []
        if not content:
            return []
        try:
            document = OutputMetadata.parse_document(content)
        except MetadataError as exc:
            self.reporter.report(
                "error", f"Could not parse metadata file at: {location.key}. Error: {exc}"
            )
            return []
        return list(document.outputs)


class OutputArtifactResolver:
    """Turn an output metadata document into renderer-ready descriptors."""

    def __init__(
        self,
        reader: FileReader,
        *,
        reporter: Optional[Reporter] = None,
        registry: Optional[Registry] = None,
    ) -> None:
        self.reporter = resolve_reporter(reporter, _LOGGER_NAME)
        self.loader = MetadataDocumentLoader(reader, reporter=self.reporter)
        self.fetcher = TabularDataFetcher(reader)
        if registry is None:
            _load_builtin_builders()
        self.registry = registry

    async def build(self, record: Mapping[str, Any]) -> ViewerConfig:
        metadata = PlotMetadata.from_dict(record)
        builder = resolve_plot_builder(metadata.type, registry=self.registry)
        return await builder(metadata, self.fetcher)

    async def _build_or_drop(self, index: int, record: Any) -> Optional[ViewerConfig]:
        try:
            return await self.build(record)
        except Exception as exc:
            self.reporter.report(
                "error",
                f"Failed to build viewer for output {index}: {get_user_message(exc)}",
            )
            return None

    async def load(self, path: Union[str, StoragePath]) -> list[ViewerConfig]:
        records = await self.loader.load(path)
        configs = await asyncio.gather(
            *(self._build_or_drop(index, record) for index, record in enumerate(records))
        )
        return [config for config in configs if config is not None]


async def load_output_viewers(
    path: Union[str, StoragePath],
    reader: FileReader,
    *,
    reporter: Optional[Reporter] = None,
) -> list[ViewerConfig]:
    return await OutputArtifactResolver(reader, reporter=reporter).load(path)


__all__ = ["MetadataDocumentLoader", "OutputArtifactResolver", "load_output_viewers"]
