"""Session Tracker - Opens and closes reading sessions from page views."""

import uuid
from datetime import datetime
from typing import Callable, List, Optional, Set

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from comic_reader.core import ReadingSession
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.sessions")

DEFAULT_IDLE_TIMEOUT_MS = 5 * 60 * 1000


class SessionTracker(QObject):
    """
    Groups page views into reading sessions.

    The first page view after opening (or after an idle gap) starts a
    session; the idle timeout or close() ends it.
    """

    session_started = Signal(object)  # ReadingSession
    session_closed = Signal(object)  # ReadingSession

    def __init__(
        self,
        idle_timeout_ms: int = DEFAULT_IDLE_TIMEOUT_MS,
        now: Callable[[], datetime] = datetime.now,
    ):
        super().__init__()
        if idle_timeout_ms <= 0:
            raise ValueError("idle_timeout_ms must be positive")

        self._now = now
        self._active: Optional[ReadingSession] = None
        self._pages_seen: Set[int] = set()
        self.history: List[ReadingSession] = []

        self._idle_timer = QTimer(self)
        self._idle_timer.setSingleShot(True)
        self._idle_timer.setInterval(idle_timeout_ms)
        self._idle_timer.timeout.connect(self._on_idle)

    @property
    def active_session(self) -> Optional[ReadingSession]:
        return self._active

    @Slot(int)
    def page_viewed(self, page: int) -> None:
        """Start a session on the first view, otherwise extend the active one."""
        if self._active is None:
            self._active = ReadingSession(
                id=uuid.uuid4().hex,
                started_at=self._now(),
                start_page=page,
                is_active=True,
            )
            self._pages_seen = {page}
            LOG.debug("Reading session started on page %s", page)
            self.session_started.emit(self._active)
        else:
            self._pages_seen.add(page)
            self._active.end_page = page
            self._active.pages_read = len(self._pages_seen) - 1
        self._idle_timer.start()

    @Slot()
    def _on_idle(self) -> None:
        LOG.debug("Reading session closed after idle timeout")
        self.close()

    def close(self) -> Optional[ReadingSession]:
        """End the active session, if any, and return it."""
        self._idle_timer.stop()
        session = self._active
        if session is None:
            return None

        ended_at = self._now()
        session.ended_at = ended_at
        session.duration_minutes = max(0.0, (ended_at - session.started_at).total_seconds() / 60)
        session.is_active = False
        self._active = None
        self._pages_seen = set()
        self.history.append(session)
        self.session_closed.emit(session)
        return session
