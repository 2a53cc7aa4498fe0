"""Extension-based MIME lookup for files found outside the metadata index."""

from ..models.common import DEFAULT_MIME_TYPE

_MIME_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "mp4": "video/mp4",
    "mp3": "audio/mp3",
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/msword",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.ms-excel",
    "txt": "text/plain",
}


def guess_mime_type(filename: str) -> str:
    _, dot, ext = filename.rpartition(".")
    if not dot:
        return DEFAULT_MIME_TYPE
    return _MIME_BY_EXTENSION.get(ext.lower(), DEFAULT_MIME_TYPE)
