"""Gesture Interpreter - Turns raw touch, wheel and key input into reader intents."""

import math
import time
from typing import Callable, Dict, Optional, Sequence, Tuple

from PySide6.QtCore import QObject, Signal

from comic_reader.core import ReaderIntent

Point = Tuple[float, float]

DEFAULT_SWIPE_THRESHOLD = 50
TAP_MAX_DISTANCE = 10
TAP_MAX_DURATION = 0.3
DOUBLE_TAP_WINDOW = 0.3
PINCH_ZOOM_IN_RATIO = 1.25
PINCH_ZOOM_OUT_RATIO = 0.8

KEY_INTENTS: Dict[str, ReaderIntent] = {
    "ArrowRight": ReaderIntent.NEXT_PAGE,
    "ArrowDown": ReaderIntent.NEXT_PAGE,
    " ": ReaderIntent.NEXT_PAGE,
    "ArrowLeft": ReaderIntent.PREV_PAGE,
    "ArrowUp": ReaderIntent.PREV_PAGE,
    "Home": ReaderIntent.FIRST_PAGE,
    "End": ReaderIntent.LAST_PAGE,
    "+": ReaderIntent.ZOOM_IN,
    "=": ReaderIntent.ZOOM_IN,
    "-": ReaderIntent.ZOOM_OUT,
    "b": ReaderIntent.TOGGLE_BOOKMARK,
    "f": ReaderIntent.TOGGLE_FULLSCREEN,
    "F11": ReaderIntent.TOGGLE_FULLSCREEN,
    "Escape": ReaderIntent.CLOSE,
}


def _distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


class GestureInterpreter(QObject):
    """
    Pure input translation.

    Keeps only transient gesture state (touch start, pinch chord, last tap)
    and emits the resulting intent; it never touches the viewport itself.
    """

    intent_emitted = Signal(object)  # ReaderIntent

    def __init__(
        self,
        swipe_threshold: int = DEFAULT_SWIPE_THRESHOLD,
        enabled: bool = True,
        keyboard_enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__()
        if swipe_threshold <= 0:
            raise ValueError("swipe_threshold must be positive")

        self.swipe_threshold = swipe_threshold
        self.enabled = enabled
        self.keyboard_enabled = keyboard_enabled
        self._clock = clock

        self._touch_start: Optional[Point] = None
        self._touch_started_at = 0.0
        self._pinch_distance: Optional[float] = None
        self._last_tap_at: Optional[float] = None

    def _emit(self, intent: Optional[ReaderIntent]) -> Optional[ReaderIntent]:
        if intent is not None:
            self.intent_emitted.emit(intent)
        return intent

    # ------------------------------------------------------------------
    # Touch
    # ------------------------------------------------------------------

    def touch_started(self, points: Sequence[Point]) -> None:
        """Record the start of a one-finger touch or a two-finger pinch."""
        if not self.enabled:
            return
        if len(points) == 1:
            self._touch_start = (float(points[0][0]), float(points[0][1]))
            self._touch_started_at = self._clock()
            self._pinch_distance = None
        elif len(points) >= 2:
            self._touch_start = None
            self._pinch_distance = _distance(points[0], points[1]) or None

    def touch_moved(self, points: Sequence[Point]) -> Optional[ReaderIntent]:
        """Emit a zoom step each time a pinch grows or shrinks past the step ratio."""
        if not self.enabled or len(points) < 2 or self._pinch_distance is None:
            return None

        current = _distance(points[0], points[1])
        ratio = current / self._pinch_distance
        intent = None
        if ratio >= PINCH_ZOOM_IN_RATIO:
            intent = ReaderIntent.ZOOM_IN
        elif ratio <= PINCH_ZOOM_OUT_RATIO:
            intent = ReaderIntent.ZOOM_OUT

        if intent is not None and current > 0:
            self._pinch_distance = current
        return self._emit(intent)

    def touch_ended(self, x: float, y: float) -> Optional[ReaderIntent]:
        """
        Finish a one-finger touch.

        A horizontal swipe past the threshold turns the page (leftward swipe
        goes forward). Two quick taps in a row toggle zoom. Anything else is a
        plain tap and produces no intent.
        """
        start = self._touch_start
        self._touch_start = None
        self._pinch_distance = None
        if not self.enabled or start is None:
            return None

        dx = x - start[0]
        dy = y - start[1]
        if abs(dx) > self.swipe_threshold and abs(dx) > abs(dy):
            self._last_tap_at = None
            return self._emit(ReaderIntent.PREV_PAGE if dx > 0 else ReaderIntent.NEXT_PAGE)

        now = self._clock()
        is_tap = (now - self._touch_started_at) < TAP_MAX_DURATION and math.hypot(dx, dy) < TAP_MAX_DISTANCE
        if not is_tap:
            self._last_tap_at = None
            return None

        if self._last_tap_at is not None and now - self._last_tap_at < DOUBLE_TAP_WINDOW:
            self._last_tap_at = None
            return self._emit(ReaderIntent.TOGGLE_ZOOM)

        self._last_tap_at = now
        return None

    def touch_cancelled(self) -> None:
        self._touch_start = None
        self._pinch_distance = None

    # ------------------------------------------------------------------
    # Wheel and keyboard
    # ------------------------------------------------------------------

    def wheel(self, delta_y: float, ctrl: bool) -> Optional[ReaderIntent]:
        """Ctrl+wheel zooms; a plain wheel is left to scrolling."""
        if not self.enabled or not ctrl or delta_y == 0:
            return None
        return self._emit(ReaderIntent.ZOOM_IN if delta_y > 0 else ReaderIntent.ZOOM_OUT)

    def key_pressed(self, key: str, in_text_input: bool = False) -> Optional[ReaderIntent]:
        """
        Translate a key name into an intent.

        Args:
            key: Key name in DOM style ("ArrowRight", " ", "+", "Escape", ...).
            in_text_input: True when focus is in a text-entry control; every
                key is then left to the control.
        """
        if not self.keyboard_enabled or in_text_input:
            return None
        intent = KEY_INTENTS.get(key)
        if intent is None and len(key) == 1:
            intent = KEY_INTENTS.get(key.lower())
        return self._emit(intent)
