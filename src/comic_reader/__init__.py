"""
Comic Reader - Desktop reading client for the comic platform.

This package provides the reading session for one comic:
- Page, zoom and fit-mode navigation with clamped bounds
- Touch, wheel and keyboard input translation
- Bookmarks cached locally and synced over REST
- Debounced reading-progress sync and reading statistics
"""

__version__ = "0.1.0"

# Make key components available at package level
from comic_reader.core import Bookmark, Document, ProgressRecord, ReadingSession
from comic_reader.io import ComicApiClient

__all__ = [
    "Bookmark",
    "ComicApiClient",
    "Document",
    "ProgressRecord",
    "ReadingSession",
]
