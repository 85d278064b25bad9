"""Auto-Advance Timer - Turns pages at a fixed interval."""

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from comic_reader.coordinators.viewport_controller import ViewportController
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.auto_advance")

STOPPED = "stopped"
RUNNING = "running"


class AutoAdvanceTimer(QObject):
    """Two-state (stopped/running) page-turn timer for one reader.

    Stops by itself when the viewport reports it could not advance, so it
    never wraps around past the last page.
    """

    state_changed = Signal(str)

    def __init__(self, viewport: ViewportController):
        super().__init__()
        if viewport is None:
            raise ValueError("ViewportController must not be None")

        self._viewport = viewport
        self._state = STOPPED
        self._timer = QTimer(self)
        self._timer.setSingleShot(False)
        self._timer.timeout.connect(self._on_tick)

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == RUNNING

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def start(self, interval_ms: int) -> None:
        """Start ticking. Calling start while running changes nothing.

        Raises:
            ValueError: If interval_ms is not positive.
        """
        if interval_ms <= 0:
            raise ValueError(f"Auto-advance interval must be positive, got {interval_ms}")
        if self._state == RUNNING:
            return
        self._timer.start(interval_ms)
        self._set_state(RUNNING)

    def stop(self) -> None:
        if self._state == STOPPED:
            return
        self._timer.stop()
        self._set_state(STOPPED)

    def toggle(self, interval_ms: int) -> None:
        if self.is_running:
            self.stop()
        else:
            self.start(interval_ms)

    @Slot()
    def _on_tick(self) -> None:
        if self._state != RUNNING:
            return
        if not self._viewport.next_page():
            LOG.debug("Auto-advance reached the last page; stopping")
            self.stop()

    def _set_state(self, state: str) -> None:
        self._state = state
        self.state_changed.emit(state)
