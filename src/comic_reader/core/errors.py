"""Exceptions raised by the reader."""

from typing import Optional


class ComicReaderError(Exception):
    """Base class for reader errors."""


class DuplicateBookmarkError(ComicReaderError):
    """The page is already bookmarked in the local cache."""

    def __init__(self, page: int):
        super().__init__(f"Page {page} is already bookmarked")
        self.page = page


class NetworkError(ComicReaderError):
    """A request failed or the server answered with a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (HTTP {self.status})" if self.status is not None else base
