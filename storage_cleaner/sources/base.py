"""Metadata source interface: an indexed, queryable view of file metadata."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterator, Mapping, Optional, Sequence

from ..models.system import SourceAvailability

ID = "id"
DISPLAY_NAME = "display_name"
SIZE = "size"
PATH = "path"
DATE_MODIFIED = "date_modified"  # seconds since epoch
MIME_TYPE = "mime_type"

DEFAULT_PROJECTION = (ID, DISPLAY_NAME, SIZE, PATH, DATE_MODIFIED, MIME_TYPE)

Row = Mapping[str, Any]


class Collection(str, Enum):
    FILES = "files"
    IMAGES = "images"
    VIDEO = "video"
    AUDIO = "audio"
    DOWNLOADS = "downloads"


class MetadataSource(ABC):
    """All metadata sources implement this interface.

    ``query`` is blocking: it runs the query and returns an iterator over the
    matching rows in a stable order. Callers move it off the event loop.
    """

    name: str = ""

    @abstractmethod
    def has_collection(self, collection: Collection) -> bool:
        ...

    @abstractmethod
    def query(
        self,
        collection: Collection,
        projection: Sequence[str] = DEFAULT_PROJECTION,
        selection: Optional[str] = None,
        selection_args: Sequence[Any] = (),
    ) -> Iterator[Row]:
        """Return rows of ``collection`` matching ``selection``.

        Raises ``SourceUnavailable`` when the collection is not offered or
        the underlying store cannot be read.
        """
        ...

    @abstractmethod
    def check_availability(self) -> list[SourceAvailability]:
        """Describe which collections are usable and how many rows they hold."""
        ...

    def close(self) -> None:
        pass
