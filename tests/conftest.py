"""Shared pytest fixtures."""

import os

# Must be set before the first QApplication is created
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Ensure a QApplication exists so timers and queued signals work."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
