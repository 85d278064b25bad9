"""Document and viewport entities for an open comic."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

MIN_ZOOM_PERCENT = 20
MAX_ZOOM_PERCENT = 400
DEFAULT_ZOOM_PERCENT = 120
ZOOM_STEP_PERCENT = 20


class FitMode(str, Enum):
    """How a page is scaled to the viewport."""

    WIDTH = "width"
    HEIGHT = "height"
    PAGE = "page"

    @classmethod
    def parse(cls, value: "FitMode | str") -> "FitMode":
        """Accept either a FitMode or its string value.

        Raises:
            ValueError: If the name is not a known fit mode.
        """
        if isinstance(value, FitMode):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown fit mode: {value}") from None


@dataclass(frozen=True)
class Document:
    """The comic opened in the reader. Immutable for the session's duration."""

    title: str
    slug: str
    total_pages: int
    file_path: Optional[Path] = None

    def __post_init__(self):
        if self.total_pages <= 0:
            raise ValueError(f"Document '{self.title}' must have at least one page, got {self.total_pages}")

    def clamp_page(self, page_number: int) -> int:
        """Clamp a 1-indexed page number into the document bounds."""
        return max(1, min(int(page_number), self.total_pages))


@dataclass(frozen=True)
class ViewportState:
    """Snapshot of what the reader is currently showing."""

    current_page: int
    zoom_percent: int = DEFAULT_ZOOM_PERCENT
    fit_mode: FitMode = FitMode.WIDTH
    rotation: int = 0
