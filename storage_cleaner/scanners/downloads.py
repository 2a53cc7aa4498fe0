"""Downloaded files."""

import logging

from ..config import Settings
from ..errors import SourceUnavailable
from ..models.common import CategoryResult, Category
from ..sources.base import PATH, Collection
from .base import BaseCategoryScanner, ScanContext, Selection, name_like_any
from .registry import register_scanner

logger = logging.getLogger(__name__)

DOWNLOAD_PATH_PATTERNS = ("%/Download/%", "%/Downloads/%")


class DownloadScanner(BaseCategoryScanner):
    category = Category.DOWNLOADS
    name = "Downloads"
    description = "Files in the downloads collection, or under a Download(s) folder"
    weight = 5.0

    def selection(self, settings: Settings) -> Selection:
        return Selection(collection=Collection.DOWNLOADS)

    def fallback_selection(self) -> Selection:
        where, args = name_like_any(PATH, list(DOWNLOAD_PATH_PATTERNS))
        return Selection(collection=Collection.FILES, where=where, args=args)

    async def scan(self, context: ScanContext) -> CategoryResult:
        try:
            return await self.query(self.selection(context.settings), context)
        except SourceUnavailable as e:
            logger.info("[%s] %s; falling back to path filter", self.name, e)
            return await self.query(self.fallback_selection(), context)


register_scanner(DownloadScanner())
