"""Reading progress and reading session entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .timestamps import parse_timestamp


@dataclass
class ReadingSession:
    """One continuous stretch of reading.

    Attributes:
        id: Session identifier (server id, or a local uuid for tracked sessions).
        started_at: When the first page of the session was viewed.
        ended_at: When the session closed; None while it is still active.
        start_page: Page the session started on.
        end_page: Last page viewed, None until a second page is seen.
        pages_read: Distinct pages viewed besides the start page.
        duration_minutes: Length of the session in minutes.
        is_active: True while the session is in progress.
    """

    id: str
    started_at: datetime
    start_page: int
    ended_at: Optional[datetime] = None
    end_page: Optional[int] = None
    pages_read: int = 0
    duration_minutes: float = 0.0
    is_active: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ReadingSession":
        started_at = parse_timestamp(payload.get("started_at"))
        if started_at is None:
            raise ValueError(f"Reading session payload has no started_at: {payload!r}")
        end_page = payload.get("end_page")
        return cls(
            id=str(payload.get("id", "")),
            started_at=started_at,
            ended_at=parse_timestamp(payload.get("ended_at")),
            start_page=int(payload.get("start_page") or 1),
            end_page=int(end_page) if end_page is not None else None,
            pages_read=int(payload.get("pages_read") or 0),
            duration_minutes=float(payload.get("duration_minutes") or 0.0),
            is_active=bool(payload.get("is_active", False)),
        )


@dataclass
class ProgressRecord:
    """A user's reading position in one comic."""

    current_page: int
    total_pages: int
    reading_time_minutes: int = 0
    last_read_at: Optional[datetime] = None
    sessions: List[ReadingSession] = field(default_factory=list)

    @property
    def percentage(self) -> float:
        if self.total_pages <= 0:
            return 0.0
        return 100.0 * self.current_page / self.total_pages

    @property
    def is_completed(self) -> bool:
        return self.total_pages > 0 and self.current_page == self.total_pages

    @classmethod
    def for_page(
        cls,
        current_page: int,
        total_pages: int,
        reading_time_minutes: int = 0,
        last_read_at: Optional[datetime] = None,
    ) -> "ProgressRecord":
        """Build the locally computed record for a page change."""
        return cls(
            current_page=current_page,
            total_pages=total_pages,
            reading_time_minutes=reading_time_minutes,
            last_read_at=last_read_at or datetime.now(),
        )

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ProgressRecord":
        """Build a record from the progress endpoint's response.

        Raises:
            ValueError: If the payload is not an object or has no current page.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Progress payload must be an object, got {type(payload).__name__}")
        # Some responses wrap the record in a data envelope
        if "current_page" not in payload and isinstance(payload.get("data"), dict):
            payload = payload["data"]
        if payload.get("current_page") is None:
            raise ValueError(f"Progress payload has no current_page: {payload!r}")

        sessions = [
            ReadingSession.from_payload(item)
            for item in payload.get("reading_sessions") or []
            if isinstance(item, dict) and item.get("started_at")
        ]
        return cls(
            current_page=int(payload["current_page"]),
            total_pages=int(payload.get("total_pages") or 0),
            reading_time_minutes=int(payload.get("reading_time_minutes") or 0),
            last_read_at=parse_timestamp(payload.get("last_read_at")),
            sessions=sessions,
        )
