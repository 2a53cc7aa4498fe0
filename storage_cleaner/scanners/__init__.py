"""Category scanners."""

from .registry import get_scanner, get_all_scanners, missing_categories, register_scanner
from .base import BaseCategoryScanner, DirectorySelection, ScanContext, Selection
from .junk import JunkScanner
from .cache import CacheScanner
from .media import MediaScanner
from .documents import DocumentScanner
from .downloads import DownloadScanner
from .large import LargeFileScanner
from .duplicates import DuplicateScanner, find_duplicates
from .temporary import TemporaryScanner

__all__ = [
    "get_scanner",
    "get_all_scanners",
    "missing_categories",
    "register_scanner",
    "BaseCategoryScanner",
    "DirectorySelection",
    "ScanContext",
    "Selection",
    "JunkScanner",
    "CacheScanner",
    "MediaScanner",
    "DocumentScanner",
    "DownloadScanner",
    "LargeFileScanner",
    "DuplicateScanner",
    "find_duplicates",
    "TemporaryScanner",
]
