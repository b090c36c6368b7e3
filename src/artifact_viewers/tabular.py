"""Fetch and parse delimited text referenced by storage locators."""

from __future__ import annotations

import csv
import io

from artifact_viewers.storage import FileReader, StoragePath, parse_storage_path


def parse_csv_rows(text: str) -> list[list[str]]:
    """Parse CSV text into rows; no header row is assumed."""
    stripped = text.strip()
    if not stripped:
        return []
    return [list(row) for row in csv.reader(io.StringIO(stripped))]


class TabularDataFetcher:
    """Read CSV content through a file reader and return raw string rows."""

    def __init__(self, reader: FileReader) -> None:
        self.reader = reader

    async def fetch_text(self, source: str | StoragePath) -> str:
        path = source if isinstance(source, StoragePath) else parse_storage_path(source)
        return await self.reader.read(path)

    async def fetch_rows(self, source: str | StoragePath) -> list[list[str]]:
        return parse_csv_rows(await self.fetch_text(source))


__all__ = ["parse_csv_rows", "TabularDataFetcher"]
