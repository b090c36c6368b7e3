"""Error hierarchy for artifact_viewers."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class ArtifactViewerError(Exception):
    """Base exception for artifact_viewers failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigError(ArtifactViewerError):
    """Configuration loading or validation error."""


class MetadataError(ArtifactViewerError):
    """Output metadata document could not be parsed."""


class ValidationError(ArtifactViewerError):
    """Validation error for a metadata record or caller input."""


class MissingFieldError(ValidationError):
    """A metadata record lacks a property its plot type requires."""

    def __init__(self, field: str, **kwargs: Any) -> None:
        super().__init__(
            f'Malformed metadata, property "{field}" is required.', **kwargs
        )
        self.field = field


class SchemaError(ValidationError):
    """A metadata record carries an unusable column schema."""


class UnsupportedFormatError(ValidationError):
    """A metadata record declares a data format that cannot be read."""


class DimensionMismatchError(ValidationError):
    """Confusion matrix data does not match the declared labels."""

    def __init__(self, observed: int, labels: int, **kwargs: Any) -> None:
        super().__init__(
            f"Data dimensions {observed} do not match the number of labels "
            f"passed {labels}",
            **kwargs,
        )
        self.observed = observed
        self.expected = labels * labels


class UnknownPlotTypeError(ValidationError):
    """A metadata record names a plot type with no registered builder."""


class PodNameError(ValidationError):
    """Pod name is structurally invalid."""


class StoragePathError(ValidationError):
    """Storage locator could not be parsed."""


class StorageError(ArtifactViewerError):
    """Reading content from artifact storage failed."""


class MetadataStoreError(ArtifactViewerError):
    """A metadata store request failed."""

    def __init__(self, message: str, *, stage: str, **kwargs: Any) -> None:
        context = dict(kwargs.pop("context", None) or {})
        context.setdefault("stage", stage)
        super().__init__(message, context=context, **kwargs)
        self.stage = stage


class VisualizationError(ArtifactViewerError):
    """The visualization service failed to render an artifact."""


__all__ = [
    "ArtifactViewerError",
    "ConfigError",
    "MetadataError",
    "ValidationError",
    "MissingFieldError",
    "SchemaError",
    "UnsupportedFormatError",
    "DimensionMismatchError",
    "UnknownPlotTypeError",
    "PodNameError",
    "StoragePathError",
    "StorageError",
    "MetadataStoreError",
    "VisualizationError",
]
