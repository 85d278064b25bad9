"""Reader Session - Central coordinator for one open comic."""

from datetime import date
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal, Slot

from comic_reader.coordinators.auto_advance_timer import AutoAdvanceTimer
from comic_reader.coordinators.gesture_interpreter import GestureInterpreter
from comic_reader.coordinators.progress_synchronizer import DEFAULT_DEBOUNCE_MS, ProgressSynchronizer
from comic_reader.coordinators.session_tracker import DEFAULT_IDLE_TIMEOUT_MS, SessionTracker
from comic_reader.coordinators.viewport_controller import ViewportController
from comic_reader.core import Document, ProgressRecord, ReaderIntent, ReaderSettings
from comic_reader.io import ComicApiClient
from comic_reader.services.api_workers import RequestRunner
from comic_reader.services.bookmark_store import BookmarkStore
from comic_reader.services.session_aggregator import ReadingStats, aggregate
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.session")


class ReaderSession(QObject):
    """
    Central Nervous System of the reader.

    Builds the viewport, input interpreter, bookmark cache, auto-advance
    timer, progress synchronizer and session tracker for one document and
    routes intents and page changes between them.
    """

    close_requested = Signal()
    fullscreen_toggled = Signal()
    closed = Signal()

    def __init__(
        self,
        document: Document,
        api_client: ComicApiClient,
        runner: RequestRunner,
        settings: Optional[ReaderSettings] = None,
        initial_page: int = 1,
        on_page_change: Optional[Callable[[int], None]] = None,
        progress_debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        idle_timeout_ms: int = DEFAULT_IDLE_TIMEOUT_MS,
    ):
        super().__init__()

        if document is None:
            raise ValueError("Document must not be None")
        if api_client is None:
            raise ValueError("ComicApiClient must not be None")
        if runner is None:
            raise ValueError("RequestRunner must not be None")

        self.document = document
        self.settings = settings or ReaderSettings()

        self.viewport = ViewportController(
            document,
            initial_page=initial_page,
            settings=self.settings,
            on_page_change=on_page_change,
        )
        self.gestures = GestureInterpreter(
            swipe_threshold=self.settings.swipe_threshold,
            enabled=self.settings.enable_gestures,
            keyboard_enabled=self.settings.enable_keyboard_shortcuts,
        )
        self.bookmarks = BookmarkStore(api_client, document.slug, runner)
        self.auto_advance = AutoAdvanceTimer(self.viewport)
        self.progress = ProgressSynchronizer(
            api_client,
            document.slug,
            runner,
            debounce_ms=progress_debounce_ms,
            enabled=self.settings.auto_save_progress,
        )
        self.sessions = SessionTracker(idle_timeout_ms=idle_timeout_ms)

        # Session state
        self._alive = False
        self._closed = False
        self._user_navigated = False
        self._resuming = False

        # Signal wiring
        self.gestures.intent_emitted.connect(self.handle_intent)
        self.viewport.page_changed.connect(self._on_page_changed)

    @property
    def is_open(self) -> bool:
        return self._alive

    def mount(self) -> None:
        """Start the session: load bookmarks and saved progress."""
        if self._closed:
            raise RuntimeError("A closed reader session cannot be mounted again")
        if self._alive:
            return
        self._alive = True
        self.sessions.page_viewed(self.viewport.current_page)
        self.bookmarks.load()
        self.progress.load(on_loaded=self._resume_from)

    def _resume_from(self, record: Optional[ProgressRecord]) -> None:
        if not self._alive or record is None or self._user_navigated:
            return
        if record.current_page > 1:
            LOG.info("Resuming %s at page %s", self.document.slug, record.current_page)
            self._resuming = True
            try:
                self.viewport.set_page(record.current_page)
            finally:
                self._resuming = False

    @Slot(int)
    def _on_page_changed(self, page: int) -> None:
        if not self._alive:
            return
        self.sessions.page_viewed(page)
        if self._resuming:
            return
        self._user_navigated = True
        self.progress.notify_page_changed(page, self.document.total_pages)

    @Slot(object)
    def handle_intent(self, intent: ReaderIntent) -> None:
        """Apply an intent coming from input translation or the UI."""
        if not self._alive:
            return

        if intent is ReaderIntent.NEXT_PAGE:
            self.viewport.next_page()
        elif intent is ReaderIntent.PREV_PAGE:
            self.viewport.previous_page()
        elif intent is ReaderIntent.FIRST_PAGE:
            self.viewport.first_page()
        elif intent is ReaderIntent.LAST_PAGE:
            self.viewport.last_page()
        elif intent is ReaderIntent.ZOOM_IN:
            self.viewport.zoom_in()
        elif intent is ReaderIntent.ZOOM_OUT:
            self.viewport.zoom_out()
        elif intent is ReaderIntent.TOGGLE_ZOOM:
            self.viewport.toggle_zoom()
        elif intent is ReaderIntent.TOGGLE_BOOKMARK:
            self.bookmarks.toggle(self.viewport.current_page)
        elif intent is ReaderIntent.TOGGLE_FULLSCREEN:
            self.fullscreen_toggled.emit()
        elif intent is ReaderIntent.CLOSE:
            self.close()
            self.close_requested.emit()
        else:
            LOG.warning("Ignoring unknown intent %r", intent)

    def add_bookmark(self, note: str = "") -> None:
        """Bookmark the current page.

        Raises:
            DuplicateBookmarkError: If the current page is already bookmarked.
        """
        self.bookmarks.add(self.viewport.current_page, note)

    def toggle_auto_advance(self) -> None:
        self.auto_advance.toggle(self.settings.auto_advance_delay_ms)

    def statistics(self, today: Optional[date] = None) -> ReadingStats:
        """Aggregate server-side session history with sessions tracked locally."""
        sessions = list(self.progress.server_record.sessions) if self.progress.server_record else []
        known_ids = {session.id for session in sessions}
        sessions.extend(s for s in self.sessions.history if s.id not in known_ids)
        return aggregate(sessions, today=today)

    def close(self) -> None:
        """Tear the session down. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.auto_advance.stop()
        self.progress.flush()
        self.sessions.close()
        self._alive = False
        self.bookmarks.dispose()
        self.progress.dispose()
        LOG.debug("Reader session for %s closed", self.document.slug)
        self.closed.emit()
