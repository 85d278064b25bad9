"""User-facing reader settings."""

from dataclasses import dataclass

from .document import FitMode


@dataclass(frozen=True)
class ReaderSettings:
    """Reader preferences that change behaviour rather than appearance.

    Attributes:
        auto_advance_delay_ms: Interval between auto-advance page turns.
        fit_mode: Fit mode applied when the reader opens.
        enable_gestures: Translate touch and wheel input into intents.
        enable_keyboard_shortcuts: Translate key presses into intents.
        swipe_threshold: Minimum horizontal swipe distance in pixels.
        auto_save_progress: Push reading progress to the server.
    """

    auto_advance_delay_ms: int = 5000
    fit_mode: FitMode = FitMode.WIDTH
    enable_gestures: bool = True
    enable_keyboard_shortcuts: bool = True
    swipe_threshold: int = 50
    auto_save_progress: bool = True
