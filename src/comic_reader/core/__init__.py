"""Domain layer - Pure entities describing the open comic and reading state."""

from .bookmark import Bookmark
from .document import (
    DEFAULT_ZOOM_PERCENT,
    MAX_ZOOM_PERCENT,
    MIN_ZOOM_PERCENT,
    ZOOM_STEP_PERCENT,
    Document,
    FitMode,
    ViewportState,
)
from .errors import ComicReaderError, DuplicateBookmarkError, NetworkError
from .intents import ReaderIntent
from .progress import ProgressRecord, ReadingSession
from .settings import ReaderSettings
from .timestamps import parse_timestamp

__all__ = [
    "Bookmark",
    "ComicReaderError",
    "DEFAULT_ZOOM_PERCENT",
    "Document",
    "DuplicateBookmarkError",
    "FitMode",
    "MAX_ZOOM_PERCENT",
    "MIN_ZOOM_PERCENT",
    "NetworkError",
    "ProgressRecord",
    "ReaderIntent",
    "ReaderSettings",
    "ReadingSession",
    "ViewportState",
    "ZOOM_STEP_PERCENT",
    "parse_timestamp",
]
