"""Images, videos and audio straight from their media collections."""

from ..config import Settings
from ..models.common import Category
from ..sources.base import SIZE, Collection
from .base import BaseCategoryScanner, Selection
from .registry import register_scanner


class MediaScanner(BaseCategoryScanner):
    def __init__(self, category: Category, collection: Collection, name: str, weight: float):
        self.category = category
        self.collection = collection
        self.name = name
        self.description = f"All non-empty files in the {collection.value} collection"
        self.weight = weight

    def selection(self, settings: Settings) -> Selection:
        return Selection(collection=self.collection, where=f"{SIZE} > 0")


register_scanner(MediaScanner(Category.IMAGES, Collection.IMAGES, "Images", 10.0))
register_scanner(MediaScanner(Category.VIDEOS, Collection.VIDEO, "Videos", 10.0))
register_scanner(MediaScanner(Category.AUDIO, Collection.AUDIO, "Audio", 10.0))
