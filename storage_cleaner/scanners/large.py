"""Oversized files."""

from ..config import Settings
from ..models.common import Category
from ..sources.base import SIZE, Collection
from .base import BaseCategoryScanner, Selection
from .registry import register_scanner


class LargeFileScanner(BaseCategoryScanner):
    category = Category.LARGE
    name = "Large Files"
    description = "Files above the large-file threshold (50 MiB by default)"
    weight = 10.0

    def selection(self, settings: Settings) -> Selection:
        return Selection(
            collection=Collection.FILES,
            where=f"{SIZE} > ?",
            args=(settings.large_file_threshold,),
        )


register_scanner(LargeFileScanner())
