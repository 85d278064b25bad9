"""Progress Synchronizer - Debounced, single-flight reading progress updates."""

import time
from typing import Callable, Optional, Tuple

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from comic_reader.core import ProgressRecord
from comic_reader.io import ApiResult, ComicApiClient
from comic_reader.services.api_workers import RequestRunner
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.progress")

DEFAULT_DEBOUNCE_MS = 800

PageState = Tuple[int, int]  # current page, total pages


class ProgressSynchronizer(QObject):
    """
    Pushes the reader's position to the progress endpoint.

    Rapid page changes collapse into one PATCH after a quiet period. At most
    one PATCH is in flight; whatever arrives meanwhile is sent once it
    resolves. Failures are logged and dropped: progress is best-effort and
    never blocks reading.
    """

    # Local record after every page change (ProgressRecord)
    progress_updated = Signal(object)
    # Server-confirmed record after a successful PATCH (ProgressRecord)
    progress_synced = Signal(object)
    # Record fetched by load() (ProgressRecord)
    progress_loaded = Signal(object)

    def __init__(
        self,
        api_client: ComicApiClient,
        slug: str,
        runner: RequestRunner,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True,
    ):
        super().__init__()

        if api_client is None:
            raise ValueError("ComicApiClient must not be None")
        if runner is None:
            raise ValueError("RequestRunner must not be None")
        if not slug:
            raise ValueError("Comic slug must not be empty")
        if debounce_ms < 0:
            raise ValueError("debounce_ms must not be negative")

        self._api = api_client
        self._slug = slug
        self._runner = runner
        self._clock = clock
        self._started_at = clock()
        self.enabled = enabled

        self._alive = True
        self._pending: Optional[PageState] = None
        self._in_flight: Optional[PageState] = None
        self._last_synced: Optional[PageState] = None
        self._flush_requested = False

        self.record: Optional[ProgressRecord] = None
        self.server_record: Optional[ProgressRecord] = None

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(debounce_ms)
        self._debounce.timeout.connect(self._on_debounce_elapsed)

    @property
    def is_in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def reading_time_minutes(self) -> int:
        """Whole minutes since the reader opened."""
        return int((self._clock() - self._started_at) // 60)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, on_loaded: Optional[Callable[[Optional[ProgressRecord]], None]] = None) -> None:
        """Fetch the saved progress for the comic."""

        def handle(result: ApiResult) -> None:
            if not self._alive:
                return
            if result.is_error:
                LOG.warning("Failed to load reading progress for %s: %s", self._slug, result.error)
                if on_loaded:
                    on_loaded(None)
                return
            self.server_record = result.data
            if self.record is None:
                self.record = result.data
            self.progress_loaded.emit(result.data)
            if on_loaded:
                on_loaded(result.data)

        self._runner.submit(lambda: self._api.get_progress(self._slug), handle)

    # ------------------------------------------------------------------
    # Page changes
    # ------------------------------------------------------------------

    @Slot(int, int)
    def notify_page_changed(self, page: int, total_pages: int) -> None:
        """Record a page change and (re)start the trailing debounce."""
        if not self._alive:
            return

        self._pending = (page, total_pages)
        self.record = ProgressRecord.for_page(page, total_pages, self.reading_time_minutes)
        self.progress_updated.emit(self.record)

        if self.enabled:
            self._debounce.start()

    @Slot()
    def _on_debounce_elapsed(self) -> None:
        self._send_pending()

    def flush(self) -> None:
        """Send the latest pending position now instead of waiting for the debounce."""
        self._debounce.stop()
        if not self.enabled:
            return
        if self._in_flight is not None:
            self._flush_requested = True
            return
        self._send_pending()

    def _send_pending(self) -> None:
        if self._pending is None or self._in_flight is not None:
            return

        state = self._pending
        self._pending = None
        if state == self._last_synced:
            return

        page, total_pages = state
        minutes = self.reading_time_minutes
        self._in_flight = state
        self._flush_requested = False
        LOG.debug("Syncing progress for %s: page %s/%s", self._slug, page, total_pages)
        self._runner.submit(
            lambda: self._api.update_progress(self._slug, page, total_pages, minutes),
            lambda result: self._on_sent(state, result),
        )

    def _on_sent(self, state: PageState, result: ApiResult) -> None:
        self._in_flight = None

        if result.is_error:
            LOG.warning("Failed to update reading progress for %s: %s", self._slug, result.error)
        else:
            self._last_synced = state
            if self._alive:
                self.server_record = result.data
                self.progress_synced.emit(result.data)

        if self._pending is None:
            return
        # After close, a position queued behind the in-flight call still goes out
        if self._flush_requested or not self._alive or not self._debounce.isActive():
            self._send_pending()

    def dispose(self) -> None:
        """Stop the debounce and ignore late results. Call flush() first."""
        self._debounce.stop()
        self._alive = False
