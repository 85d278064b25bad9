"""Bookmark entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .timestamps import parse_timestamp


@dataclass(frozen=True)
class Bookmark:
    """A user's bookmark on one page of a comic.

    The server is authoritative for ``id`` and both timestamps.
    """

    id: str
    page: int
    note: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Bookmark":
        """Build a bookmark from an API payload.

        The API has used both ``page`` and ``page_number`` for the page field.

        Raises:
            ValueError: If the payload has no id or page.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Bookmark payload must be an object, got {type(payload).__name__}")
        page = payload.get("page", payload.get("page_number"))
        if payload.get("id") is None or page is None:
            raise ValueError(f"Bookmark payload is missing id or page: {payload!r}")
        return cls(
            id=str(payload["id"]),
            page=int(page),
            note=payload.get("note") or "",
            created_at=parse_timestamp(payload.get("created_at")),
            updated_at=parse_timestamp(payload.get("updated_at")),
        )

    def with_note(self, note: str) -> "Bookmark":
        """Return a copy with a new note (used for optimistic edits)."""
        return Bookmark(
            id=self.id,
            page=self.page,
            note=note,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
