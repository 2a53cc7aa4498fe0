"""Office documents, PDFs and plain text."""

from ..config import Settings
from ..models.common import Category
from ..sources.base import DISPLAY_NAME, Collection
from .base import BaseCategoryScanner, Selection, name_like_any
from .registry import register_scanner

DOCUMENT_EXTENSIONS = (".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".txt", ".rtf")


class DocumentScanner(BaseCategoryScanner):
    category = Category.DOCUMENTS
    name = "Documents"
    description = "PDF, Office and text documents"
    weight = 10.0

    def selection(self, settings: Settings) -> Selection:
        where, args = name_like_any(DISPLAY_NAME, [f"%{ext}" for ext in DOCUMENT_EXTENSIONS])
        return Selection(collection=Collection.FILES, where=where, args=args)


register_scanner(DocumentScanner())
