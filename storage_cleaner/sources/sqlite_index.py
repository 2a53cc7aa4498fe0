"""SQLite-backed file metadata index."""

import logging
import mimetypes
import os
import sqlite3
import threading
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Sequence, Union

from ..errors import SourceUnavailable
from ..models.system import SourceAvailability
from .base import (
    DEFAULT_PROJECTION,
    Collection,
    MetadataSource,
    Row,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS files (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    display_name TEXT NOT NULL,
    size INTEGER NOT NULL DEFAULT 0,
    path TEXT NOT NULL UNIQUE,
    date_modified INTEGER,
    mime_type TEXT,
    media_type TEXT,
    is_download INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_files_media_type ON files(media_type);
CREATE INDEX IF NOT EXISTS idx_files_size ON files(size);

CREATE TABLE IF NOT EXISTS index_meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_COLUMNS = frozenset(DEFAULT_PROJECTION)

_COLLECTION_FILTERS = {
    Collection.FILES: "1 = 1",
    Collection.IMAGES: "media_type = 'image'",
    Collection.VIDEO: "media_type = 'video'",
    Collection.AUDIO: "media_type = 'audio'",
    Collection.DOWNLOADS: "is_download = 1",
}

_FETCH_SIZE = 500
_INSERT_BATCH = 1000


class SQLiteMetadataSource(MetadataSource):
    """File index stored in SQLite.

    The ``downloads`` collection only exists once an index build has been
    given at least one downloads directory.
    """

    name = "SQLite file index"

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._write_lock = threading.Lock()
        self._conn.executescript(SCHEMA)
        self._conn.commit()

    def __enter__(self) -> "SQLiteMetadataSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def has_collection(self, collection: Collection) -> bool:
        if collection is Collection.DOWNLOADS:
            return self._get_meta("downloads_indexed") == "1"
        return collection in _COLLECTION_FILTERS

    def query(
        self,
        collection: Collection,
        projection: Sequence[str] = DEFAULT_PROJECTION,
        selection: Optional[str] = None,
        selection_args: Sequence[Any] = (),
    ) -> Iterator[Row]:
        if not self.has_collection(collection):
            raise SourceUnavailable(f"Collection not available: {collection.value}")

        columns = [c for c in projection if c in _COLUMNS] or ["id"]
        sql = f"SELECT {', '.join(columns)} FROM files WHERE {_COLLECTION_FILTERS[collection]}"
        if selection:
            sql += f" AND ({selection})"
        sql += " ORDER BY id"

        try:
            cursor = self._conn.execute(sql, tuple(selection_args))
        except sqlite3.Error as e:
            raise SourceUnavailable(f"Query on {collection.value} failed: {e}") from e
        return self._iter_rows(cursor)

    def _iter_rows(self, cursor: sqlite3.Cursor) -> Iterator[Row]:
        try:
            while True:
                rows = cursor.fetchmany(_FETCH_SIZE)
                if not rows:
                    return
                for row in rows:
                    yield dict(row)
        finally:
            cursor.close()

    def insert_rows(self, rows: Iterable[dict]) -> int:
        """Upsert index entries keyed by path. Returns the number written."""
        sql = """
            INSERT INTO files
            (display_name, size, path, date_modified, mime_type, media_type, is_download)
            VALUES (:display_name, :size, :path, :date_modified, :mime_type, :media_type, :is_download)
            ON CONFLICT(path) DO UPDATE SET
                display_name = excluded.display_name,
                size = excluded.size,
                date_modified = excluded.date_modified,
                mime_type = excluded.mime_type,
                media_type = excluded.media_type,
                is_download = excluded.is_download
        """
        written = 0
        batch: list[dict] = []
        with self._write_lock:
            for row in rows:
                batch.append({
                    "display_name": row.get("display_name", ""),
                    "size": row.get("size", 0),
                    "path": row["path"],
                    "date_modified": row.get("date_modified"),
                    "mime_type": row.get("mime_type"),
                    "media_type": row.get("media_type"),
                    "is_download": int(bool(row.get("is_download", False))),
                })
                if len(batch) >= _INSERT_BATCH:
                    self._conn.executemany(sql, batch)
                    written += len(batch)
                    batch = []
            if batch:
                self._conn.executemany(sql, batch)
                written += len(batch)
            self._conn.commit()
        return written

    def enable_downloads_collection(self, enabled: bool = True) -> None:
        self._set_meta("downloads_indexed", "1" if enabled else "0")

    def clear(self) -> None:
        with self._write_lock:
            self._conn.execute("DELETE FROM files")
            self._conn.commit()

    def rebuild(
        self,
        roots: Iterable[Path],
        downloads_dirs: Iterable[Path] = (),
    ) -> int:
        """Replace the index contents with a fresh walk of ``roots``."""
        roots = [Path(r).resolve() for r in roots]
        downloads = [Path(d).resolve() for d in downloads_dirs]
        self.clear()
        total = 0
        for root in roots:
            total += self.insert_rows(iter_index_entries(root, downloads))
        for d in downloads:
            if not any(_is_within(d, r) for r in roots):
                total += self.insert_rows(iter_index_entries(d, downloads))
        self.enable_downloads_collection(bool(downloads))
        logger.info("Indexed %d files into %s", total, self.db_path)
        return total

    def count(self, collection: Collection = Collection.FILES) -> int:
        if not self.has_collection(collection):
            return 0
        row = self._conn.execute(
            f"SELECT COUNT(*) FROM files WHERE {_COLLECTION_FILTERS[collection]}"
        ).fetchone()
        return row[0]

    def check_availability(self) -> list[SourceAvailability]:
        sources = []
        for collection in Collection:
            available = self.has_collection(collection)
            count = self.count(collection) if available else None
            sources.append(SourceAvailability(
                source_id=f"collection:{collection.value}",
                name=collection.value.capitalize(),
                available=available,
                detail=f"{count} indexed files" if available else "Not indexed",
                count=count,
            ))
        return sources

    def _get_meta(self, key: str) -> Optional[str]:
        row = self._conn.execute(
            "SELECT value FROM index_meta WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def _set_meta(self, key: str, value: str) -> None:
        with self._write_lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO index_meta (key, value) VALUES (?, ?)",
                (key, value),
            )
            self._conn.commit()


def media_type_for(mime_type: Optional[str]) -> Optional[str]:
    if not mime_type:
        return None
    major = mime_type.split("/", 1)[0]
    return major if major in ("image", "video", "audio") else None


def iter_index_entries(root: Path, downloads_dirs: Sequence[Path] = ()) -> Iterator[dict]:
    """Walk ``root`` without following symlinks and yield index entries."""
    if not root.is_dir():
        logger.warning("Index root missing or not a directory: %s", root)
        return

    def _on_error(e: OSError) -> None:
        logger.warning("Cannot index %s: %s", e.filename, e.strerror)

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        for fname in filenames:
            fpath = current / fname
            try:
                if fpath.is_symlink():
                    continue
                stat = fpath.stat()
            except OSError:
                continue
            resolved = fpath.resolve()
            mime_type, _ = mimetypes.guess_type(fname)
            yield {
                "display_name": fname,
                "size": stat.st_size,
                "path": str(resolved),
                "date_modified": int(stat.st_mtime),
                "mime_type": mime_type,
                "media_type": media_type_for(mime_type),
                "is_download": any(_is_within(resolved, d) for d in downloads_dirs),
            }


def _is_within(path: Path, directory: Path) -> bool:
    try:
        path.relative_to(directory)
        return True
    except ValueError:
        return False


def build_index(
    db_path: Union[str, Path],
    roots: Iterable[Path],
    downloads_dirs: Iterable[Path] = (),
) -> int:
    """(Re)create the index at ``db_path``. Returns the number of files indexed."""
    with SQLiteMetadataSource(db_path) as source:
        return source.rebuild(roots, downloads_dirs)
