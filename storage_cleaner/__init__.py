"""storage-cleaner: classify storage into cleanup categories."""

__version__ = "0.1.0"
