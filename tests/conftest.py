"""Shared fixtures: in-memory index, settings and row builders."""

from pathlib import Path

import pytest

from storage_cleaner.config import Settings
from storage_cleaner.sources.sqlite_index import SQLiteMetadataSource, media_type_for


def _make_row(
    name: str,
    size: int,
    path: str = "",
    mime_type: str | None = None,
    date_modified: int = 1_700_000_000,
    is_download: bool = False,
) -> dict:
    return {
        "display_name": name,
        "size": size,
        "path": path or f"/storage/emulated/0/{name}",
        "date_modified": date_modified,
        "mime_type": mime_type,
        "media_type": media_type_for(mime_type),
        "is_download": is_download,
    }


@pytest.fixture
def make_row():
    return _make_row


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    cache = tmp_path / "cache"
    cache.mkdir()
    return Settings(
        index_path=tmp_path / "index.db",
        storage_roots=[tmp_path / "storage"],
        downloads_dirs=[],
        cache_dirs=[cache],
        index_on_startup=False,
        pacing_delay=0,
    )


@pytest.fixture
def index():
    source = SQLiteMetadataSource(":memory:")
    yield source
    source.close()
