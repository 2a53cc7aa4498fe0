"""Junk files: leftovers identified by extension."""

from ..config import Settings
from ..models.common import Category
from ..sources.base import DISPLAY_NAME, Collection
from .base import BaseCategoryScanner, Selection, name_like_any
from .registry import register_scanner

JUNK_EXTENSIONS = (".tmp", ".temp", ".log", ".old", ".bak", ".part", ".crdownload")


class JunkScanner(BaseCategoryScanner):
    category = Category.JUNK
    name = "Junk Files"
    description = "Temporary, log, backup and partial-download files"
    weight = 15.0

    def selection(self, settings: Settings) -> Selection:
        where, args = name_like_any(DISPLAY_NAME, [f"%{ext}" for ext in JUNK_EXTENSIONS])
        return Selection(collection=Collection.FILES, where=where, args=args)


register_scanner(JunkScanner())
