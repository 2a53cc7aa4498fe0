"""Temporary files matched by name fragments anywhere in the file name."""

from ..config import Settings
from ..models.common import Category
from ..sources.base import DISPLAY_NAME, Collection
from .base import BaseCategoryScanner, Selection, name_like_any
from .registry import register_scanner

TEMP_NAME_PATTERNS = ("~", ".tmp", ".temp", "thumb", ".bak", ".old", "cache")


class TemporaryScanner(BaseCategoryScanner):
    category = Category.TEMPORARY
    name = "Temporary Files"
    description = "Editor backups, thumbnails and other throwaway files"
    weight = 5.0

    def selection(self, settings: Settings) -> Selection:
        where, args = name_like_any(DISPLAY_NAME, [f"%{p}%" for p in TEMP_NAME_PATTERNS])
        return Selection(collection=Collection.FILES, where=where, args=args)


register_scanner(TemporaryScanner())
