"""Rendering recipes for artifact types known to the metadata store."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Callable

from artifact_viewers.registry import register
from artifact_viewers.viewers import HTMLViewerConfig
from artifact_viewers.visualization import (
    VisualizationService,
    build_custom_viewer,
    build_statistics_viewer,
)

Recipe = Callable[[VisualizationService, str], list[Awaitable[HTMLViewerConfig]]]

_WIDGET_CDN = (
    "https://cdn.jsdelivr.net/gh/Bobgy/model-analysis@kfp/"
    "tensorflow_model_analysis/notebook/jupyter/js/dist/"
)


def statistics_uris(uri: str) -> list[str]:
    return [f"{uri}/eval/stats_tfrecord", f"{uri}/train/stats_tfrecord"]


def schema_script(uri: str) -> list[str]:
    return [
        "import tensorflow_data_validation as tfdv",
        f"schema = tfdv.load_schema_text('{uri}/schema.pbtxt')",
        "tfdv.display_schema(schema)",
    ]


def anomalies_script(uri: str) -> list[str]:
    return [
        "import tensorflow_data_validation as tfdv",
        f"anomalies = tfdv.load_anomalies_text('{uri}/anomalies.pbtxt')",
        "tfdv.display_anomalies(anomalies)",
    ]


def evaluation_script(uri: str) -> list[str]:
    # The slicing-metrics widget loads its JS from a patched build of the
    # TFMA notebook extension.
    config_file = f"{uri}/eval_config.json"
    return [
        "import io",
        "import json",
        "import tensorflow as tf",
        "import tensorflow_model_analysis as tfma",
        "from ipywidgets.embed import embed_minimal_html",
        "from IPython.core.display import display, HTML",
        f"config_file=tf.io.gfile.GFile('{config_file}', 'r')",
        "config=json.loads(config_file.read())",
        "featureKeys=list(filter(lambda x: 'featureKeys' in x, "
        "config['evalConfig']['slicingSpecs']))",
        "columns=[] if len(featureKeys) == 0 else featureKeys[0]['featureKeys']",
        "slicing_spec = tfma.slicer.SingleSliceSpec(columns=columns)",
        f"eval_result = tfma.load_eval_result('{uri}')",
        "slicing_metrics_view = tfma.view.render_slicing_metrics("
        "eval_result, slicing_spec=slicing_spec)",
        "view = io.StringIO()",
        "embed_minimal_html(view, views=[slicing_metrics_view], title='Slicing Metrics')",
        "html = view.getvalue().replace('dist/embed-amd.js\" crossorigin=\"anonymous\">"
        "</script>', 'dist/embed-amd.js\" crossorigin=\"anonymous\" "
        f"data-jupyter-widgets-cdn=\"{_WIDGET_CDN}\" crossorigin=\"anonymous\"></script>')",
        "display(HTML(html))",
    ]


def example_statistics_recipe(
    service: VisualizationService,
    uri: str,
) -> list[Awaitable[HTMLViewerConfig]]:
    return [build_statistics_viewer(service, item) for item in statistics_uris(uri)]


def schema_recipe(
    service: VisualizationService,
    uri: str,
) -> list[Awaitable[HTMLViewerConfig]]:
    return [build_custom_viewer(service, schema_script(uri))]


def example_anomalies_recipe(
    service: VisualizationService,
    uri: str,
) -> list[Awaitable[HTMLViewerConfig]]:
    return [build_custom_viewer(service, anomalies_script(uri))]


def model_evaluation_recipe(
    service: VisualizationService,
    uri: str,
) -> list[Awaitable[HTMLViewerConfig]]:
    return [build_custom_viewer(service, evaluation_script(uri))]


ARTIFACT_RECIPES: dict[str, Recipe] = {
    "ExampleStatistics": example_statistics_recipe,
    "Schema": schema_recipe,
    "ExampleAnomalies": example_anomalies_recipe,
    "ModelEvaluation": model_evaluation_recipe,
}

for _type_name, _recipe in ARTIFACT_RECIPES.items():
    register("artifact", _type_name, _recipe)


__all__ = [
    "Recipe",
    "ARTIFACT_RECIPES",
    "statistics_uris",
    "schema_script",
    "anomalies_script",
    "evaluation_script",
    "example_statistics_recipe",
    "schema_recipe",
    "example_anomalies_recipe",
    "model_evaluation_recipe",
]
