"""UI layer - PySide6 presentation components."""

from .reader_window import ReaderWindow, qt_key_name

__all__ = ["ReaderWindow", "qt_key_name"]
