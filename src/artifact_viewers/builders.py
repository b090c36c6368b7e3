"""Plot builders: one metadata record in, one viewer descriptor out."""

from __future__ import annotations

import logging
import math
import re
from typing import Optional

from artifact_viewers.errors import (
    DimensionMismatchError,
    MissingFieldError,
    SchemaError,
    UnsupportedFormatError,
    ValidationError,
)
from artifact_viewers.metadata import PlotMetadata, SchemaField
from artifact_viewers.registry import register
from artifact_viewers.storage import parse_storage_path
from artifact_viewers.tabular import TabularDataFetcher, parse_csv_rows
from artifact_viewers.viewers import (
    ConfusionMatrixConfig,
    HTMLViewerConfig,
    MarkdownViewerConfig,
    PagedTableConfig,
    PlotType,
    RocPoint,
    ROCCurveConfig,
    TensorboardViewerConfig,
)

logger = logging.getLogger("artifact_viewers.builders")


def _require_source(metadata: PlotMetadata) -> str:
    if not metadata.source:
        raise MissingFieldError("source")
    return metadata.source


def _require_schema(metadata: PlotMetadata, message: str) -> list[SchemaField]:
    if metadata.column_schema is None:
        raise MissingFieldError("schema")
    fields = metadata.schema_fields()
    if fields is None:
        raise SchemaError(message)
    return fields


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _to_float(value: str) -> float:
    if not value.strip():
        return 0.0
    try:
        return float(value)
    except ValueError:
        return math.nan


async def build_confusion_matrix_config(
    metadata: PlotMetadata,
    fetcher: TabularDataFetcher,
) -> ConfusionMatrixConfig:
    source = _require_source(metadata)
    if metadata.labels is None:
        raise MissingFieldError("labels")
    fields = _require_schema(
        metadata,
        '"schema" must be an array of {"name": string, "type": string} objects',
    )

    rows = await fetcher.fetch_rows(source)
    labels = list(metadata.labels)
    label_index = {label: index for index, label in enumerate(labels)}

    if len(labels) ** 2 != len(rows):
        raise DimensionMismatchError(len(rows), len(labels))

    data: list[list[Optional[int]]] = [[None] * len(labels) for _ in labels]
    for row_no, row in enumerate(rows):
        if len(row) < 3:
            raise ValidationError(
                f"Confusion matrix row {row_no} must have target, predicted "
                f"and count columns, got {len(row)}."
            )
        target, predicted, count = row[0].strip(), row[1].strip(), row[2]
        i = label_index.get(target)
        j = label_index.get(predicted)
        if i is None or j is None:
            # Unknown labels are reported, not rejected; the cell stays empty.
            logger.warning(
                "Confusion matrix row %d references unknown label(s): "
                "target=%r predicted=%r.",
                row_no,
                target,
                predicted,
            )
            continue
        match = _LEADING_INT.match(count)
        if match is None:
            raise ValidationError(
                f"Confusion matrix count in row {row_no} is not an integer: {count!r}"
            )
        # Trailing text is ignored, so "5.0" counts as 5.
        data[i][j] = int(match.group(1))

    names = []
    for item in fields:
        if not item.name:
            raise SchemaError(
                'Each item in the "schema" array must contain a "name" field'
            )
        names.append(item.name)
    if len(names) < 2:
        raise SchemaError('"schema" must name at least two columns for the axes')

    return ConfusionMatrixConfig(
        axes=(names[0], names[1]),
        labels=tuple(labels),
        data=tuple(tuple(row) for row in data),
    )


async def build_paged_table_config(
    metadata: PlotMetadata,
    fetcher: TabularDataFetcher,
) -> PagedTableConfig:
    source = _require_source(metadata)
    if metadata.header is None:
        raise MissingFieldError("header")
    if not metadata.format:
        raise MissingFieldError("format")
    if metadata.format != "csv":
        raise UnsupportedFormatError(f"Unsupported table format: {metadata.format}")

    rows = await fetcher.fetch_rows(source)
    return PagedTableConfig(
        labels=tuple(metadata.header),
        data=tuple(tuple(cell.strip() for cell in row) for row in rows),
    )


async def build_tensorboard_config(
    metadata: PlotMetadata,
    fetcher: TabularDataFetcher,
) -> TensorboardViewerConfig:
    source = _require_source(metadata)
    parse_storage_path(source)
    return TensorboardViewerConfig(url=source)


async def build_html_viewer_config(
    metadata: PlotMetadata,
    fetcher: TabularDataFetcher,
) -> HTMLViewerConfig:
    source = _require_source(metadata)
    return HTMLViewerConfig(html_content=await fetcher.fetch_text(source))


async def build_markdown_viewer_config(
    metadata: PlotMetadata,
    fetcher: TabularDataFetcher,
) -> MarkdownViewerConfig:
    source = _require_source(metadata)
    if metadata.storage == "inline":
        return MarkdownViewerConfig(markdown_content=source)
    return MarkdownViewerConfig(markdown_content=await fetcher.fetch_text(source))


def _find_column(fields: list[SchemaField], column: str, *, prefix: bool = False) -> int:
    for index, item in enumerate(fields):
        name = item.name or ""
        if (prefix and name.startswith(column)) or name == column:
            return index
    raise SchemaError(f'Malformed schema, expected to find a column named "{column}"')


async def build_roc_curve_config(
    metadata: PlotMetadata,
    fetcher: TabularDataFetcher,
) -> ROCCurveConfig:
    source = _require_source(metadata)
    fields = _require_schema(
        metadata,
        'Malformed schema, must be an array of {"name": string, "type": string}',
    )

    text = await fetcher.fetch_text(source)
    fpr_index = _find_column(fields, "fpr")
    tpr_index = _find_column(fields, "tpr")
    threshold_index = _find_column(fields, "threshold", prefix=True)
    width = max(fpr_index, tpr_index, threshold_index) + 1

    points = []
    for row_no, row in enumerate(parse_csv_rows(text)):
        if len(row) < width:
            raise ValidationError(
                f"ROC row {row_no} has {len(row)} column(s); schema needs {width}."
            )
        points.append(
            RocPoint(
                x=_to_float(row[fpr_index]),
                y=_to_float(row[tpr_index]),
                label=row[threshold_index].strip(),
            )
        )
    return ROCCurveConfig(data=tuple(points))


PLOT_BUILDERS = {
    PlotType.CONFUSION_MATRIX: build_confusion_matrix_config,
    PlotType.MARKDOWN: build_markdown_viewer_config,
    PlotType.TABLE: build_paged_table_config,
    PlotType.TENSORBOARD: build_tensorboard_config,
    PlotType.WEB_APP: build_html_viewer_config,
    PlotType.ROC: build_roc_curve_config,
}

for _plot_type, _builder in PLOT_BUILDERS.items():
    register("plot", _plot_type.value, _builder)


__all__ = [
    "PLOT_BUILDERS",
    "build_confusion_matrix_config",
    "build_paged_table_config",
    "build_tensorboard_config",
    "build_html_viewer_config",
    "build_markdown_viewer_config",
    "build_roc_curve_config",
]
