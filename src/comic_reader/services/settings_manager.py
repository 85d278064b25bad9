"""Settings Manager - Handles API endpoint and reader configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from comic_reader.core import FitMode, ReaderSettings
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.settings")

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_REQUEST_TIMEOUT = 10
DEFAULT_PROGRESS_DEBOUNCE_MS = 800
DEFAULT_IDLE_TIMEOUT_MS = 5 * 60 * 1000
DEFAULT_AUTO_ADVANCE_DELAY_MS = 5000
DEFAULT_SWIPE_THRESHOLD = 50

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ConnectionSettings:
    """Where and how the reader talks to the comic platform."""

    base_url: str
    csrf_token: Optional[str]
    session_cookie: Optional[Tuple[str, str]]
    request_timeout: int


class SettingsManager:
    """
    Manages settings loaded from the environment.

    Values come from a .env file in the project root, overridden by real
    environment variables that are already set.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        self._project_root = project_root
        load_dotenv(dotenv_path=project_root / ".env")

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        load_dotenv(dotenv_path=self._project_root / ".env", override=True)

    def _get_str(self, name: str) -> Optional[str]:
        value = os.getenv(name)
        return value.strip() if value and value.strip() else None

    def _get_int(self, name: str, default: int) -> int:
        raw = self._get_str(name)
        if raw is None:
            return default
        try:
            value = int(raw)
        except ValueError:
            LOG.warning("Ignoring non-integer %s=%r, using %s", name, raw, default)
            return default
        if value <= 0:
            LOG.warning("Ignoring non-positive %s=%r, using %s", name, raw, default)
            return default
        return value

    def _get_bool(self, name: str, default: bool) -> bool:
        raw = self._get_str(name)
        if raw is None:
            return default
        value = raw.lower()
        if value in _TRUE:
            return True
        if value in _FALSE:
            return False
        LOG.warning("Ignoring non-boolean %s=%r, using %s", name, raw, default)
        return default

    def get_api_base_url(self) -> str:
        """Base URL of the comic platform, without a trailing slash."""
        return (self._get_str("COMIC_READER_API_BASE_URL") or DEFAULT_API_BASE_URL).rstrip("/")

    def get_csrf_token(self) -> Optional[str]:
        return self._get_str("COMIC_READER_CSRF_TOKEN")

    def get_session_cookie(self) -> Optional[Tuple[str, str]]:
        """Session cookie as (name, value), parsed from ``name=value``."""
        raw = self._get_str("COMIC_READER_SESSION_COOKIE")
        if raw is None:
            return None
        name, sep, value = raw.partition("=")
        if not sep or not name.strip():
            LOG.warning("COMIC_READER_SESSION_COOKIE must look like name=value; ignoring it")
            return None
        return name.strip(), value.strip()

    def get_request_timeout(self) -> int:
        return self._get_int("COMIC_READER_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)

    def get_progress_debounce_ms(self) -> int:
        return self._get_int("COMIC_READER_PROGRESS_DEBOUNCE_MS", DEFAULT_PROGRESS_DEBOUNCE_MS)

    def get_idle_timeout_ms(self) -> int:
        return self._get_int("COMIC_READER_IDLE_TIMEOUT_MS", DEFAULT_IDLE_TIMEOUT_MS)

    def connection_settings(self) -> ConnectionSettings:
        return ConnectionSettings(
            base_url=self.get_api_base_url(),
            csrf_token=self.get_csrf_token(),
            session_cookie=self.get_session_cookie(),
            request_timeout=self.get_request_timeout(),
        )

    def reader_settings(self) -> ReaderSettings:
        """Build reader preferences from the environment."""
        fit_mode = FitMode.WIDTH
        raw_fit_mode = self._get_str("COMIC_READER_FIT_MODE")
        if raw_fit_mode is not None:
            try:
                fit_mode = FitMode.parse(raw_fit_mode)
            except ValueError:
                LOG.warning("Ignoring unknown COMIC_READER_FIT_MODE=%r", raw_fit_mode)

        return ReaderSettings(
            auto_advance_delay_ms=self._get_int("COMIC_READER_AUTO_ADVANCE_DELAY_MS", DEFAULT_AUTO_ADVANCE_DELAY_MS),
            fit_mode=fit_mode,
            enable_gestures=self._get_bool("COMIC_READER_ENABLE_GESTURES", True),
            enable_keyboard_shortcuts=self._get_bool("COMIC_READER_ENABLE_KEYBOARD_SHORTCUTS", True),
            swipe_threshold=self._get_int("COMIC_READER_SWIPE_THRESHOLD", DEFAULT_SWIPE_THRESHOLD),
            auto_save_progress=self._get_bool("COMIC_READER_AUTO_SAVE_PROGRESS", True),
        )
