"""Client side of the remote visualization service."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
import logging
from typing import Any, Mapping, Optional, Protocol, Sequence

import httpx

from artifact_viewers.errors import VisualizationError
from artifact_viewers.viewers import HTMLViewerConfig

DEFAULT_TIMEOUT = 120.0
VISUALIZATIONS_PATH = "/apis/v1beta1/visualizations"

logger = logging.getLogger("artifact_viewers.visualization")


class VisualizationType(str, Enum):
    ROC_CURVE = "ROC_CURVE"
    TFDV = "TFDV"
    TFMA = "TFMA"
    TABLE = "TABLE"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class VisualizationRequest:
    type: VisualizationType
    source: str = ""
    arguments: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type.value, "source": self.source}
        if self.arguments is not None:
            payload["arguments"] = self.arguments
        return payload


class VisualizationService(Protocol):
    """Renders a visualization request and returns the response payload."""

    async def render(self, request: VisualizationRequest) -> Mapping[str, Any]:
        ...


class HttpVisualizationService:
    """Render visualizations through the pipeline API server."""

    def __init__(
        self,
        base_url: str,
        *,
        namespace: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.namespace = namespace
        self.timeout = timeout
        self._client = client

    @property
    def url(self) -> str:
        url = f"{self.base_url}{VISUALIZATIONS_PATH}"
        if self.namespace:
            url = f"{url}/{self.namespace}"
        return url

    async def render(self, request: VisualizationRequest) -> Mapping[str, Any]:
        payload = request.to_dict()
        logger.debug("Requesting %s visualization for %r.", request.type.value, request.source)
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text.strip() or exc.response.reason_phrase
            raise VisualizationError(
                f"Visualization service returned {exc.response.status_code}: {detail}",
                context={"type": request.type.value, "source": request.source},
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise VisualizationError(
                f"Visualization service request failed: {exc}",
                context={"type": request.type.value, "source": request.source},
            ) from exc
        if not isinstance(result, Mapping):
            raise VisualizationError("Visualization service returned a non-object response.")
        return result


def _html_content(response: Mapping[str, Any]) -> Optional[str]:
    return response.get("htmlContent") or response.get("html_content")


async def build_custom_viewer(
    service: VisualizationService,
    script: Sequence[str],
) -> HTMLViewerConfig:
    """Render a generated Python script and wrap the HTML it produces."""
    request = VisualizationRequest(
        type=VisualizationType.CUSTOM,
        source="",
        arguments=json.dumps({"code": list(script)}),
    )
    html = _html_content(await service.render(request))
    if not html:
        raise VisualizationError("Failed to build artifact viewer")
    return HTMLViewerConfig(html_content=html)


async def build_statistics_viewer(
    service: VisualizationService,
    uri: str,
) -> HTMLViewerConfig:
    request = VisualizationRequest(type=VisualizationType.TFDV, source=uri)
    html = _html_content(await service.render(request))
    if not html:
        raise VisualizationError(
            "Failed to build artifact viewer, no value in visualization.htmlContent"
        )
    return HTMLViewerConfig(html_content=html)


__all__ = [
    "DEFAULT_TIMEOUT",
    "VISUALIZATIONS_PATH",
    "VisualizationType",
    "VisualizationRequest",
    "VisualizationService",
    "HttpVisualizationService",
    "build_custom_viewer",
    "build_statistics_viewer",
]
