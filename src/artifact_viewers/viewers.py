"""Renderer-ready viewer descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class PlotType(str, Enum):
    CONFUSION_MATRIX = "confusion_matrix"
    MARKDOWN = "markdown"
    ROC = "roc"
    TABLE = "table"
    TENSORBOARD = "tensorboard"
    WEB_APP = "web-app"


@dataclass(frozen=True)
class ConfusionMatrixConfig:
    axes: tuple[str, str]
    labels: tuple[str, ...]
    data: tuple[tuple[Optional[int], ...], ...]
    type: PlotType = field(default=PlotType.CONFUSION_MATRIX, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "axes": list(self.axes),
            "labels": list(self.labels),
            "data": [list(row) for row in self.data],
        }


@dataclass(frozen=True)
class PagedTableConfig:
    labels: tuple[str, ...]
    data: tuple[tuple[str, ...], ...]
    type: PlotType = field(default=PlotType.TABLE, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "labels": list(self.labels),
            "data": [list(row) for row in self.data],
        }


@dataclass(frozen=True)
class TensorboardViewerConfig:
    url: str
    type: PlotType = field(default=PlotType.TENSORBOARD, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "url": self.url}


@dataclass(frozen=True)
class HTMLViewerConfig:
    html_content: str
    type: PlotType = field(default=PlotType.WEB_APP, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "htmlContent": self.html_content}


@dataclass(frozen=True)
class MarkdownViewerConfig:
    markdown_content: str
    type: PlotType = field(default=PlotType.MARKDOWN, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "markdownContent": self.markdown_content}


@dataclass(frozen=True)
class RocPoint:
    x: float
    y: float
    label: str


@dataclass(frozen=True)
class ROCCurveConfig:
    data: tuple[RocPoint, ...]
    type: PlotType = field(default=PlotType.ROC, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "data": [
                {"x": point.x, "y": point.y, "label": point.label}
                for point in self.data
            ],
        }


ViewerConfig = Union[
    ConfusionMatrixConfig,
    PagedTableConfig,
    TensorboardViewerConfig,
    HTMLViewerConfig,
    MarkdownViewerConfig,
    ROCCurveConfig,
]


__all__ = [
    "PlotType",
    "ConfusionMatrixConfig",
    "PagedTableConfig",
    "TensorboardViewerConfig",
    "HTMLViewerConfig",
    "MarkdownViewerConfig",
    "RocPoint",
    "ROCCurveConfig",
    "ViewerConfig",
]
