from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import pytest


def pytest_configure() -> None:
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_path = str(src_root)
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


class FakeFileReader:
    """Serves content keyed by ``<bucket>/<key>``; exceptions are raised."""

    def __init__(self, files: Mapping[str, Union[str, Exception]]) -> None:
        self.files = dict(files)
        self.reads: list[str] = []

    async def read(self, path: Any) -> str:
        location = f"{path.bucket}/{path.key}"
        self.reads.append(location)
        if location not in self.files:
            from artifact_viewers.errors import StorageError

            raise StorageError(f"Not found: {location}")
        content = self.files[location]
        if isinstance(content, Exception):
            raise content
        return content


class FakeVisualizationService:
    """Returns canned HTML per request and records every request."""

    def __init__(
        self,
        html: Optional[str] = "<div>rendered</div>",
        *,
        error: Optional[Exception] = None,
    ) -> None:
        self.html = html
        self.error = error
        self.requests: list[Any] = []

    async def render(self, request: Any) -> Mapping[str, Any]:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.html is None:
            return {}
        return {"htmlContent": f"{self.html}:{request.type.value}:{request.source}"}


class RecordingReporter:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def report(self, severity: str, message: str) -> None:
        self.messages.append((severity, message))

    def by_severity(self, severity: str) -> list[str]:
        return [message for level, message in self.messages if level == severity]


@pytest.fixture
def make_reader():
    return FakeFileReader


@pytest.fixture
def make_visualizations():
    return FakeVisualizationService


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
