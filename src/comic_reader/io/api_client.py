"""Comic API client - REST access to bookmarks and reading progress."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar
from urllib.parse import quote

import requests

from comic_reader.core import Bookmark, NetworkError, ProgressRecord
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.api")

T = TypeVar("T")

_MUTATING_METHODS = {"POST", "PATCH", "PUT", "DELETE"}


@dataclass
class ApiResult(Generic[T]):
    """Outcome of an API call. Exactly one of data/error is meaningful."""

    data: Optional[T] = None
    error: Optional[NetworkError] = None
    status: Optional[int] = None

    @property
    def is_error(self) -> bool:
        """True if the request failed."""
        return self.error is not None

    @classmethod
    def failure(cls, message: str, status: Optional[int] = None) -> "ApiResult[T]":
        return cls(error=NetworkError(message, status=status), status=status)


class ComicApiClient:
    """
    Client for the comic platform's bookmark and progress endpoints.

    Every method returns an ApiResult instead of raising, so callers on the
    UI side can log a failure and carry on.
    """

    def __init__(
        self,
        base_url: str,
        csrf_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = 10,
    ):
        if not base_url:
            raise ValueError("base_url must not be empty")
        self.base_url = base_url.rstrip("/")
        self.csrf_token = csrf_token
        self.timeout = timeout
        # The session keeps cookies between calls, like a browser with credentials included
        self.session = session or requests.Session()

    def set_session_cookie(self, name: str, value: str) -> None:
        self.session.cookies.set(name, value)

    def _comic_url(self, slug: str, *parts: str) -> str:
        path = "/".join(quote(str(part), safe="") for part in (slug, *parts))
        return f"{self.base_url}/api/comics/{path}"

    def _headers(self, method: str, has_body: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        if method in _MUTATING_METHODS:
            headers["X-CSRF-TOKEN"] = self.csrf_token or ""
        return headers

    def _request(
        self,
        method: str,
        url: str,
        parse: Callable[[Any], T],
        body: Optional[Dict[str, Any]] = None,
        expect_body: bool = True,
    ) -> ApiResult[T]:
        try:
            response = self.session.request(
                method,
                url,
                json=body,
                headers=self._headers(method, body is not None),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            LOG.debug("%s %s failed: %s", method, url, exc)
            return ApiResult.failure(f"{method} {url} failed: {exc}")

        status = response.status_code
        if not 200 <= status < 300:
            LOG.debug("%s %s answered %s", method, url, status)
            return ApiResult.failure(f"{method} {url} was rejected", status=status)

        if not expect_body:
            return ApiResult(data=None, status=status)

        try:
            payload = response.json()
        except ValueError:
            return ApiResult.failure(f"{method} {url} returned a non-JSON body", status=status)

        try:
            data = parse(payload)
        except (ValueError, TypeError, KeyError) as exc:
            return ApiResult.failure(f"{method} {url} returned an unexpected payload: {exc}", status=status)
        return ApiResult(data=data, status=status)

    # ------------------------------------------------------------------
    # Bookmarks
    # ------------------------------------------------------------------

    def list_bookmarks(self, slug: str) -> ApiResult[List[Bookmark]]:
        def parse(payload: Any) -> List[Bookmark]:
            items = payload.get("data") if isinstance(payload, dict) else payload
            return [Bookmark.from_payload(item) for item in items or []]

        return self._request("GET", self._comic_url(slug, "bookmarks"), parse)

    def create_bookmark(self, slug: str, page: int, note: str) -> ApiResult[Bookmark]:
        return self._request(
            "POST",
            self._comic_url(slug, "bookmarks"),
            _parse_bookmark,
            body={"page_number": page, "note": note},
        )

    def update_bookmark(self, slug: str, bookmark_id: str, note: str) -> ApiResult[Bookmark]:
        return self._request(
            "PATCH",
            self._comic_url(slug, "bookmarks", bookmark_id),
            _parse_bookmark,
            body={"note": note},
        )

    def delete_bookmark(self, slug: str, bookmark_id: str) -> ApiResult[None]:
        return self._request(
            "DELETE",
            self._comic_url(slug, "bookmarks", bookmark_id),
            lambda payload: None,
            expect_body=False,
        )

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def get_progress(self, slug: str) -> ApiResult[ProgressRecord]:
        return self._request("GET", self._comic_url(slug, "progress"), ProgressRecord.from_payload)

    def update_progress(
        self,
        slug: str,
        current_page: int,
        total_pages: int,
        reading_time_minutes: Optional[int] = None,
    ) -> ApiResult[ProgressRecord]:
        body: Dict[str, Any] = {"current_page": current_page, "total_pages": total_pages}
        if reading_time_minutes is not None:
            body["reading_time_minutes"] = reading_time_minutes
        return self._request("PATCH", self._comic_url(slug, "progress"), ProgressRecord.from_payload, body=body)


def _parse_bookmark(payload: Any) -> Bookmark:
    # Single resources may come wrapped as {"data": {...}}
    if isinstance(payload, dict) and "id" not in payload and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    return Bookmark.from_payload(payload)
