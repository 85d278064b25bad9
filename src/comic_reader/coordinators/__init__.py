"""Coordinators - Reader state and orchestration between input, UI and services."""

from .auto_advance_timer import RUNNING, STOPPED, AutoAdvanceTimer
from .gesture_interpreter import GestureInterpreter
from .progress_synchronizer import ProgressSynchronizer
from .reader_session import ReaderSession
from .session_tracker import SessionTracker
from .viewport_controller import ViewportController

__all__ = [
    "AutoAdvanceTimer",
    "GestureInterpreter",
    "ProgressSynchronizer",
    "ReaderSession",
    "RUNNING",
    "SessionTracker",
    "STOPPED",
    "ViewportController",
]
