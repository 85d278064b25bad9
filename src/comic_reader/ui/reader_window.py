"""Reader Window - Application shell that renders the PDF and forwards input."""

from typing_extensions import override

from PySide6.QtCore import QEvent, QObject, QPointF, Qt, Slot
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtPdf import QPdfDocument
from PySide6.QtPdfWidgets import QPdfView
from PySide6.QtWidgets import (
    QAbstractSpinBox,
    QApplication,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QTextEdit,
)

from comic_reader.coordinators import ReaderSession
from comic_reader.core import DuplicateBookmarkError, FitMode, ReaderIntent
from comic_reader.services import format_duration

# Qt key codes mapped to the key names the gesture interpreter understands
QT_KEY_NAMES = {
    Qt.Key.Key_Right: "ArrowRight",
    Qt.Key.Key_Left: "ArrowLeft",
    Qt.Key.Key_Up: "ArrowUp",
    Qt.Key.Key_Down: "ArrowDown",
    Qt.Key.Key_Space: " ",
    Qt.Key.Key_Home: "Home",
    Qt.Key.Key_End: "End",
    Qt.Key.Key_Plus: "+",
    Qt.Key.Key_Equal: "=",
    Qt.Key.Key_Minus: "-",
    Qt.Key.Key_Escape: "Escape",
    Qt.Key.Key_F11: "F11",
}

TEXT_INPUT_WIDGETS = (QLineEdit, QTextEdit, QPlainTextEdit, QAbstractSpinBox)

PDF_ZOOM_MODES = {
    FitMode.WIDTH: QPdfView.ZoomMode.FitToWidth,
    # QPdfView has no height-only fit; fitting the whole page is the closest match
    FitMode.HEIGHT: QPdfView.ZoomMode.FitInView,
    FitMode.PAGE: QPdfView.ZoomMode.FitInView,
}


def qt_key_name(event: QKeyEvent) -> str:
    """Key name for a Qt key event, falling back to the typed text."""
    name = QT_KEY_NAMES.get(Qt.Key(event.key()))
    if name is not None:
        return name
    return event.text()


def focus_in_text_input() -> bool:
    """True when keyboard focus sits in a text-entry control."""
    return isinstance(QApplication.focusWidget(), TEXT_INPUT_WIDGETS)


class ReaderWindow(QMainWindow):
    """Shows one comic and keeps the view in step with the reader session."""

    def __init__(self, session: ReaderSession, pdf_document: QPdfDocument):
        super().__init__()
        self.session = session
        self.pdf_document = pdf_document

        self.setWindowTitle(session.document.title)
        self.setGeometry(100, 100, 1200, 800)

        self._setup_ui()
        self._create_toolbar()
        self._connect_session()
        self._apply_fit_mode(session.viewport.fit_mode.value)
        self._jump_to_page(session.viewport.current_page)
        self._update_status()
        self._update_stats()

    def _setup_ui(self):
        """Initialize the PDF view and status line."""
        self.pdf_view = QPdfView(self)
        self.pdf_view.setDocument(self.pdf_document)
        self.pdf_view.setPageMode(QPdfView.PageMode.SinglePage)
        self.pdf_view.viewport().installEventFilter(self)
        # The scroll area consumes arrows and Home/End before they reach the window
        self.pdf_view.installEventFilter(self)
        self.setCentralWidget(self.pdf_view)

        self.stats_label = QLabel()
        self.statusBar().addWidget(self.stats_label)
        self.status_label = QLabel()
        self.statusBar().addPermanentWidget(self.status_label)

    def _create_toolbar(self):
        """Create the navigation toolbar."""
        toolbar = self.addToolBar("Reader")
        intents = [
            ("First", ReaderIntent.FIRST_PAGE),
            ("Previous", ReaderIntent.PREV_PAGE),
            ("Next", ReaderIntent.NEXT_PAGE),
            ("Last", ReaderIntent.LAST_PAGE),
            ("Zoom Out", ReaderIntent.ZOOM_OUT),
            ("Zoom In", ReaderIntent.ZOOM_IN),
        ]
        self._nav_actions = {}
        for label, intent in intents:
            action = QAction(label, self)
            action.triggered.connect(lambda checked=False, i=intent: self.session.handle_intent(i))
            toolbar.addAction(action)
            self._nav_actions[intent] = action

        toolbar.addSeparator()

        bookmark_action = QAction("Bookmark Page", self)
        bookmark_action.triggered.connect(self._on_add_bookmark)
        toolbar.addAction(bookmark_action)

        self.auto_advance_action = QAction("Auto-Advance", self)
        self.auto_advance_action.setCheckable(True)
        self.auto_advance_action.triggered.connect(lambda checked=False: self.session.toggle_auto_advance())
        toolbar.addAction(self.auto_advance_action)

        stats_action = QAction("Reading Stats", self)
        stats_action.triggered.connect(self._show_statistics)
        toolbar.addAction(stats_action)

    def _connect_session(self):
        viewport = self.session.viewport
        viewport.page_changed.connect(self._jump_to_page)
        viewport.page_changed.connect(lambda _page: self._update_status())
        viewport.zoom_changed.connect(self._apply_zoom)
        viewport.fit_mode_changed.connect(self._apply_fit_mode)
        self.session.bookmarks.bookmarks_changed.connect(self._update_status)
        self.session.auto_advance.state_changed.connect(
            lambda state: self.auto_advance_action.setChecked(self.session.auto_advance.is_running)
        )
        self.session.progress.progress_loaded.connect(lambda _record: self._update_stats())
        self.session.sessions.session_closed.connect(lambda _session: self._update_stats())
        self.session.close_requested.connect(self.close)
        self.session.fullscreen_toggled.connect(self._toggle_fullscreen)

    @Slot(int)
    def _jump_to_page(self, page: int):
        self.pdf_view.pageNavigator().jump(page - 1, QPointF(), 0)

    @Slot(int)
    def _apply_zoom(self, zoom_percent: int):
        self.pdf_view.setZoomMode(QPdfView.ZoomMode.Custom)
        self.pdf_view.setZoomFactor(zoom_percent / 100.0)
        self._update_status()

    @Slot(str)
    def _apply_fit_mode(self, mode: str):
        self.pdf_view.setZoomMode(PDF_ZOOM_MODES[FitMode.parse(mode)])

    @Slot()
    def _update_status(self):
        viewport = self.session.viewport
        marker = " ★" if self.session.bookmarks.is_bookmarked(viewport.current_page) else ""
        self.status_label.setText(
            f"Page {viewport.current_page} / {self.session.document.total_pages}"
            f" · {viewport.zoom_percent}%{marker}"
        )
        self._nav_actions[ReaderIntent.FIRST_PAGE].setEnabled(viewport.can_go_previous)
        self._nav_actions[ReaderIntent.PREV_PAGE].setEnabled(viewport.can_go_previous)
        self._nav_actions[ReaderIntent.NEXT_PAGE].setEnabled(viewport.can_go_next)
        self._nav_actions[ReaderIntent.LAST_PAGE].setEnabled(viewport.can_go_next)

    def _update_stats(self):
        stats = self.session.statistics()
        if stats.session_count == 0:
            self.stats_label.setText("No reading sessions yet")
            return
        sessions = "session" if stats.session_count == 1 else "sessions"
        text = f"Read {format_duration(stats.total_reading_minutes)} in {stats.session_count} {sessions}"
        if stats.streak_days > 1:
            text += f" · {stats.streak_days}-day streak"
        self.stats_label.setText(text)

    def _show_statistics(self):
        stats = self.session.statistics()
        if stats.session_count == 0:
            self.show_info("Reading Statistics", "No reading sessions yet")
            return
        lines = [
            f"Total time: {format_duration(stats.total_reading_minutes)}",
            f"Sessions: {stats.session_count}",
            f"Average session: {format_duration(stats.average_session_duration)}",
            f"Pages per session: {stats.pages_per_session_avg:.1f}",
            f"Reading speed: {stats.reading_speed_pages_per_minute:.2f} pages/min",
            f"Streak: {stats.streak_days} days",
            f"Trend: {stats.velocity_trend} ({stats.velocity_change_percent:+.0f}%)",
        ]
        self.show_info("Reading Statistics", "\n".join(lines))

    def _on_add_bookmark(self):
        try:
            self.session.add_bookmark()
        except DuplicateBookmarkError:
            self.show_info("Bookmark", "Already bookmarked")

    def _toggle_fullscreen(self):
        if self.isFullScreen():
            self.showNormal()
        else:
            self.showFullScreen()

    def show_info(self, title: str, message: str):
        """Display an information message to the user."""
        QMessageBox.information(self, title, message)

    @override
    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        """Feed keys, mouse drags and ctrl+wheel on the page into the gesture interpreter."""
        if event.type() == QEvent.Type.KeyPress:
            if self._handle_key(event):
                return True
        elif watched is self.pdf_view.viewport() and self._handle_pointer(event):
            return True
        return super().eventFilter(watched, event)

    def _handle_pointer(self, event: QEvent) -> bool:
        # Ignored viewport events bubble up to the view; only the viewport reports them
        gestures = self.session.gestures
        event_type = event.type()
        if event_type in (QEvent.Type.MouseButtonPress, QEvent.Type.MouseButtonDblClick):
            if event.button() == Qt.MouseButton.LeftButton:
                pos = event.position()
                gestures.touch_started([(pos.x(), pos.y())])
        elif event_type == QEvent.Type.MouseButtonRelease:
            if event.button() == Qt.MouseButton.LeftButton:
                pos = event.position()
                gestures.touch_ended(pos.x(), pos.y())
        elif event_type == QEvent.Type.Wheel:
            ctrl = bool(event.modifiers() & Qt.KeyboardModifier.ControlModifier)
            if gestures.wheel(event.angleDelta().y(), ctrl) is not None:
                return True
        return False

    @override
    def keyPressEvent(self, event: QKeyEvent):
        """Translate key presses into reader intents."""
        if not self._handle_key(event):
            super().keyPressEvent(event)

    def _handle_key(self, event: QKeyEvent) -> bool:
        intent = self.session.gestures.key_pressed(qt_key_name(event), focus_in_text_input())
        return intent is not None

    @override
    def closeEvent(self, event: QCloseEvent):
        """Stop timers and flush progress before the window goes away."""
        self.session.close()
        event.accept()
