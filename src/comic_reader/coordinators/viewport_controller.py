"""Viewport Controller - Page, zoom and fit state of the open comic."""

from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal, Slot

from comic_reader.core import (
    DEFAULT_ZOOM_PERCENT,
    MAX_ZOOM_PERCENT,
    MIN_ZOOM_PERCENT,
    ZOOM_STEP_PERCENT,
    Document,
    FitMode,
    ReaderSettings,
    ViewportState,
)

DOUBLE_TAP_ZOOM_PERCENT = 200


class ViewportController(QObject):
    """
    Owns what part of the document is visible.

    Navigation requests outside the document are clamped, never rejected.
    Signals fire only when a value actually changes.
    """

    page_changed = Signal(int)
    zoom_changed = Signal(int)
    fit_mode_changed = Signal(str)
    rotation_changed = Signal(int)

    def __init__(
        self,
        document: Document,
        initial_page: int = 1,
        settings: Optional[ReaderSettings] = None,
        on_page_change: Optional[Callable[[int], None]] = None,
    ):
        super().__init__()

        if document is None:
            raise ValueError("Document must not be None")

        settings = settings or ReaderSettings()
        self.document = document
        self._on_page_change = on_page_change
        self._current_page = document.clamp_page(initial_page)
        self._zoom_percent = DEFAULT_ZOOM_PERCENT
        self._fit_mode = settings.fit_mode
        self._rotation = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def zoom_percent(self) -> int:
        return self._zoom_percent

    @property
    def fit_mode(self) -> FitMode:
        return self._fit_mode

    @property
    def rotation(self) -> int:
        return self._rotation

    @property
    def can_go_previous(self) -> bool:
        return self._current_page > 1

    @property
    def can_go_next(self) -> bool:
        return self._current_page < self.document.total_pages

    @property
    def progress_percentage(self) -> float:
        return 100.0 * self._current_page / self.document.total_pages

    @property
    def state(self) -> ViewportState:
        return ViewportState(
            current_page=self._current_page,
            zoom_percent=self._zoom_percent,
            fit_mode=self._fit_mode,
            rotation=self._rotation,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @Slot(int)
    def set_page(self, page_number: int) -> int:
        """
        Navigate to a page.

        Args:
            page_number: 1-indexed page; out-of-range values are clamped.

        Returns:
            The page actually shown after the call.
        """
        target = self.document.clamp_page(page_number)
        if target != self._current_page:
            self._current_page = target
            self.page_changed.emit(target)
            if self._on_page_change is not None:
                self._on_page_change(target)
        return self._current_page

    def _move_to(self, page_number: int) -> bool:
        before = self._current_page
        return self.set_page(page_number) != before

    @Slot()
    def next_page(self) -> bool:
        """Go forward one page. Returns False at the last page."""
        return self._move_to(self._current_page + 1)

    @Slot()
    def previous_page(self) -> bool:
        """Go back one page. Returns False at the first page."""
        return self._move_to(self._current_page - 1)

    @Slot()
    def first_page(self) -> bool:
        return self._move_to(1)

    @Slot()
    def last_page(self) -> bool:
        return self._move_to(self.document.total_pages)

    # ------------------------------------------------------------------
    # Zoom, fit and rotation
    # ------------------------------------------------------------------

    def _apply_zoom(self, zoom_percent: int) -> int:
        clamped = max(MIN_ZOOM_PERCENT, min(int(zoom_percent), MAX_ZOOM_PERCENT))
        if clamped != self._zoom_percent:
            self._zoom_percent = clamped
            self.zoom_changed.emit(clamped)
        return self._zoom_percent

    def set_zoom(self, delta: int) -> int:
        """Change zoom by delta percent, clamped to [20, 400]."""
        return self._apply_zoom(self._zoom_percent + delta)

    @Slot()
    def zoom_in(self) -> int:
        return self.set_zoom(ZOOM_STEP_PERCENT)

    @Slot()
    def zoom_out(self) -> int:
        return self.set_zoom(-ZOOM_STEP_PERCENT)

    @Slot()
    def reset_zoom(self) -> int:
        return self._apply_zoom(DEFAULT_ZOOM_PERCENT)

    @Slot()
    def toggle_zoom(self) -> int:
        """Double-tap behaviour: zoomed in resets, otherwise jump to 200%."""
        if self._zoom_percent > DEFAULT_ZOOM_PERCENT:
            return self.reset_zoom()
        return self._apply_zoom(DOUBLE_TAP_ZOOM_PERCENT)

    def set_fit_mode(self, mode: FitMode | str) -> FitMode:
        """Set the fit mode unconditionally.

        Raises:
            ValueError: If mode is not a known fit mode name.
        """
        fit_mode = FitMode.parse(mode)
        self._fit_mode = fit_mode
        self.fit_mode_changed.emit(fit_mode.value)
        return fit_mode

    @Slot()
    def rotate(self) -> int:
        self._rotation = (self._rotation + 90) % 360
        self.rotation_changed.emit(self._rotation)
        return self._rotation
