"""Application cache directories (not covered by the metadata index)."""

from ..config import Settings
from ..models.common import Category
from .base import BaseCategoryScanner, DirectorySelection
from .registry import register_scanner


class CacheScanner(BaseCategoryScanner):
    category = Category.CACHE
    name = "Cache Files"
    description = "Everything under the configured cache directories"
    weight = 15.0

    def selection(self, settings: Settings) -> DirectorySelection:
        return DirectorySelection(roots=tuple(settings.cache_dirs))


register_scanner(CacheScanner())
