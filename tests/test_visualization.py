import asyncio
import json

import httpx
import pytest

from artifact_viewers.errors import VisualizationError
from artifact_viewers.mlmd.recipes import ARTIFACT_RECIPES, statistics_uris
from artifact_viewers.visualization import (
    HttpVisualizationService,
    VisualizationRequest,
    VisualizationType,
    build_custom_viewer,
    build_statistics_viewer,
)


def _render(handler, request: VisualizationRequest, namespace: str = ""):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            service = HttpVisualizationService(
                "http://api:8888/", namespace=namespace, client=client
            )
            return await service.render(request)

    return asyncio.run(_run())


def test_service_url_includes_namespace() -> None:
    assert (
        HttpVisualizationService("http://api:8888/").url
        == "http://api:8888/apis/v1beta1/visualizations"
    )
    assert (
        HttpVisualizationService("http://api:8888", namespace="kubeflow").url
        == "http://api:8888/apis/v1beta1/visualizations/kubeflow"
    )


def test_service_posts_request() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"htmlContent": "<div/>"})

    response = _render(
        handler,
        VisualizationRequest(VisualizationType.TFDV, source="gs://b/stats"),
        namespace="team",
    )

    assert response == {"htmlContent": "<div/>"}
    [request] = seen
    assert request.method == "POST"
    assert request.url.path == "/apis/v1beta1/visualizations/team"
    assert json.loads(request.content) == {"type": "TFDV", "source": "gs://b/stats"}


def test_service_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="kernel died")

    with pytest.raises(VisualizationError) as exc:
        _render(handler, VisualizationRequest(VisualizationType.CUSTOM, arguments="{}"))
    assert "500" in str(exc.value)
    assert "kernel died" in str(exc.value)


def test_service_rejects_non_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(VisualizationError):
        _render(handler, VisualizationRequest(VisualizationType.CUSTOM))


def test_build_custom_viewer_sends_script(make_visualizations) -> None:
    service = make_visualizations("<p>")

    viewer = asyncio.run(build_custom_viewer(service, ["import x", "x.show()"]))

    [request] = service.requests
    assert request.type is VisualizationType.CUSTOM
    assert json.loads(request.arguments) == {"code": ["import x", "x.show()"]}
    assert viewer.html_content == "<p>:CUSTOM:"


def test_build_statistics_viewer_requires_html(make_visualizations) -> None:
    with pytest.raises(VisualizationError) as exc:
        asyncio.run(build_statistics_viewer(make_visualizations(None), "gs://b/stats"))
    assert "htmlContent" in str(exc.value)


def test_statistics_uris_cover_both_splits() -> None:
    assert statistics_uris("gs://b/s") == [
        "gs://b/s/eval/stats_tfrecord",
        "gs://b/s/train/stats_tfrecord",
    ]


def test_recipe_order() -> None:
    assert list(ARTIFACT_RECIPES) == [
        "ExampleStatistics",
        "Schema",
        "ExampleAnomalies",
        "ModelEvaluation",
    ]
