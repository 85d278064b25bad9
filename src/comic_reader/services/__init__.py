"""Services layer - business logic and request execution."""

from comic_reader.services.api_workers import (
    ApiWorker,
    ImmediateRequestRunner,
    RequestRunner,
    ThreadPoolRequestRunner,
    WorkerSignals,
)
from comic_reader.services.bookmark_store import BookmarkStore
from comic_reader.services.session_aggregator import ReadingStats, aggregate, format_duration
from comic_reader.services.settings_manager import ConnectionSettings, SettingsManager

__all__ = [
    "ApiWorker",
    "BookmarkStore",
    "ConnectionSettings",
    "ImmediateRequestRunner",
    "ReadingStats",
    "RequestRunner",
    "SettingsManager",
    "ThreadPoolRequestRunner",
    "WorkerSignals",
    "aggregate",
    "format_duration",
]
