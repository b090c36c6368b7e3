"""Storage locators and the readers that fetch their content."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Protocol, Union

import httpx

from artifact_viewers.errors import StorageError, StoragePathError

DEFAULT_TIMEOUT = 30.0

_SCHEMES = (
    ("gs://", "gcs"),
    ("minio://", "minio"),
    ("s3://", "s3"),
    ("http://", "http"),
    ("https://", "https"),
)

logger = logging.getLogger("artifact_viewers.storage")


@dataclass(frozen=True)
class StoragePath:
    source: str
    bucket: str
    key: str

    def __str__(self) -> str:
        return f"{self.source}://{self.bucket}/{self.key}"


def parse_storage_path(value: str) -> StoragePath:
    if not isinstance(value, str):
        raise StoragePathError(f"Unsupported storage path: {value!r}")
    for prefix, source in _SCHEMES:
        if value.startswith(prefix):
            bucket, _, key = value[len(prefix) :].partition("/")
            if not bucket:
                raise StoragePathError(f"Storage path has no bucket: {value}")
            return StoragePath(source=source, bucket=bucket, key=key)
    raise StoragePathError(f"Unsupported storage path: {value}")


class FileReader(Protocol):
    """Reads the full text content behind a storage path."""

    async def read(self, path: StoragePath) -> str:
        ...


class HttpFileReader:
    """Read artifacts through the UI server's artifact endpoint."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def _get(self, client: httpx.AsyncClient, path: StoragePath) -> httpx.Response:
        return await client.get(
            f"{self.base_url}/artifacts/get",
            params={"source": path.source, "bucket": path.bucket, "key": path.key},
        )

    async def read(self, path: StoragePath) -> str:
        logger.debug("Reading artifact %s.", path)
        try:
            if self._client is not None:
                response = await self._get(self._client, path)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await self._get(client, path)
        except httpx.HTTPError as exc:
            raise StorageError(
                f"Failed to read {path}: {exc}",
                context={"path": str(path)},
            ) from exc
        if response.is_error:
            detail = response.text.strip() or response.reason_phrase
            raise StorageError(
                f"Failed to read {path}: {response.status_code} {detail}",
                user_message=detail,
                context={"path": str(path), "status": response.status_code},
            )
        return response.text


class LocalFileReader:
    """Read artifacts from a local mirror laid out as <root>/<bucket>/<key>."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def resolve(self, path: StoragePath) -> Path:
        key = PurePosixPath(path.key)
        if not key.parts or key.is_absolute() or ".." in key.parts:
            raise StorageError(f"Storage key must be a relative path: {path.key!r}")
        return self.root / path.bucket / Path(*key.parts)

    async def read(self, path: StoragePath) -> str:
        target = self.resolve(path)
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except OSError as exc:
            raise StorageError(
                f"Failed to read {path}: {exc}",
                context={"path": str(path), "file": str(target)},
            ) from exc


__all__ = [
    "DEFAULT_TIMEOUT",
    "StoragePath",
    "parse_storage_path",
    "FileReader",
    "HttpFileReader",
    "LocalFileReader",
]
