"""File metadata sources."""

from .base import DEFAULT_PROJECTION, Collection, MetadataSource
from .sqlite_index import SQLiteMetadataSource, build_index

__all__ = [
    "DEFAULT_PROJECTION",
    "Collection",
    "MetadataSource",
    "SQLiteMetadataSource",
    "build_index",
]
