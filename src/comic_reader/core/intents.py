"""Reader intents produced by input translation and the auto-advance timer."""

from enum import Enum


class ReaderIntent(Enum):
    NEXT_PAGE = "next_page"
    PREV_PAGE = "prev_page"
    FIRST_PAGE = "first_page"
    LAST_PAGE = "last_page"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    TOGGLE_ZOOM = "toggle_zoom"
    TOGGLE_BOOKMARK = "toggle_bookmark"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    CLOSE = "close"
