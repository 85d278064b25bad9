"""Bookmark Store - Local cache of the open comic's bookmarks, synced over REST."""

from typing import Callable, Dict, List, Optional, Set

from PySide6.QtCore import QObject, Signal

from comic_reader.core import Bookmark, DuplicateBookmarkError
from comic_reader.io import ApiResult, ComicApiClient
from comic_reader.services.api_workers import RequestRunner
from comic_reader.utils.logging import get_logger

LOG = get_logger("comic_reader.bookmarks")

BookmarkCallback = Callable[[Optional[Bookmark]], None]


class BookmarkStore(QObject):
    """Caches bookmarks for one (comic, user) pair.

    Edits and removals are applied locally first. When the server rejects
    one, the cache is reloaded from the server, which stays authoritative.
    """

    # Emitted whenever the cached bookmark set changes
    bookmarks_changed = Signal()

    def __init__(self, api_client: ComicApiClient, slug: str, runner: RequestRunner):
        super().__init__()

        if api_client is None:
            raise ValueError("ComicApiClient must not be None")
        if runner is None:
            raise ValueError("RequestRunner must not be None")
        if not slug:
            raise ValueError("Comic slug must not be empty")

        self._api = api_client
        self._slug = slug
        self._runner = runner
        self._bookmarks: Dict[str, Bookmark] = {}
        self._pending_pages: Set[int] = set()
        # Changes confirmed after the latest load was submitted; a late load must not undo them
        self._added_since_load: Dict[str, Bookmark] = {}
        self._removed_since_load: Set[str] = set()
        self._alive = True
        self.loaded = False

    def load(self) -> None:
        """Fetch the bookmark set from the server and replace the cache."""
        self._added_since_load = {}
        self._removed_since_load = set()
        self._runner.submit(lambda: self._api.list_bookmarks(self._slug), self._on_loaded)

    def _on_loaded(self, result: ApiResult) -> None:
        if not self._alive:
            return
        if result.is_error:
            LOG.warning("Failed to load bookmarks for %s: %s", self._slug, result.error)
            return
        bookmarks = {bookmark.id: bookmark for bookmark in result.data}
        bookmarks.update(self._added_since_load)
        for bookmark_id in self._removed_since_load:
            bookmarks.pop(bookmark_id, None)
        self._bookmarks = bookmarks
        self.loaded = True
        self.bookmarks_changed.emit()

    def list(self) -> List[Bookmark]:
        """Cached bookmarks ordered by page."""
        return sorted(self._bookmarks.values(), key=lambda b: (b.page, b.id))

    def bookmark_for_page(self, page: int) -> Optional[Bookmark]:
        for bookmark in self._bookmarks.values():
            if bookmark.page == page:
                return bookmark
        return None

    def is_bookmarked(self, page: int) -> bool:
        """True if the page has a bookmark or one is being created."""
        return page in self._pending_pages or self.bookmark_for_page(page) is not None

    def add(self, page: int, note: str = "", on_done: Optional[BookmarkCallback] = None) -> None:
        """Create a bookmark on the server and cache the confirmed record.

        Raises:
            DuplicateBookmarkError: If the page is already bookmarked locally.
                A bookmark still being created counts. No request is made in
                that case.
        """
        if self.is_bookmarked(page):
            raise DuplicateBookmarkError(page)

        note = note or f"Bookmark on page {page}"
        self._pending_pages.add(page)

        def handle(result: ApiResult) -> None:
            self._pending_pages.discard(page)
            if not self._alive:
                return
            if result.is_error:
                LOG.warning("Failed to add bookmark on page %s of %s: %s", page, self._slug, result.error)
                if on_done:
                    on_done(None)
                return
            bookmark = result.data
            self._bookmarks[bookmark.id] = bookmark
            self._added_since_load[bookmark.id] = bookmark
            self.bookmarks_changed.emit()
            if on_done:
                on_done(bookmark)

        self._runner.submit(lambda: self._api.create_bookmark(self._slug, page, note), handle)

    def update(self, bookmark_id: str, note: str) -> None:
        """Change a bookmark's note locally, then confirm it with the server."""
        bookmark_id = str(bookmark_id)
        existing = self._bookmarks.get(bookmark_id)
        if existing is None:
            LOG.warning("Cannot update unknown bookmark %s", bookmark_id)
            return

        self._bookmarks[bookmark_id] = existing.with_note(note)
        self.bookmarks_changed.emit()

        def handle(result: ApiResult) -> None:
            if not self._alive:
                return
            if result.is_error:
                LOG.warning("Failed to update bookmark %s: %s; reloading", bookmark_id, result.error)
                self.load()
                return
            if bookmark_id in self._bookmarks:
                self._bookmarks[bookmark_id] = result.data
                self.bookmarks_changed.emit()

        self._runner.submit(lambda: self._api.update_bookmark(self._slug, bookmark_id, note), handle)

    def remove(self, bookmark_id: str) -> None:
        """Drop a bookmark locally, then delete it on the server."""
        bookmark_id = str(bookmark_id)
        if self._bookmarks.pop(bookmark_id, None) is None:
            LOG.warning("Cannot remove unknown bookmark %s", bookmark_id)
            return
        self._added_since_load.pop(bookmark_id, None)
        self._removed_since_load.add(bookmark_id)
        self.bookmarks_changed.emit()

        def handle(result: ApiResult) -> None:
            if not self._alive:
                return
            if result.is_error:
                LOG.warning("Failed to remove bookmark %s: %s; reloading", bookmark_id, result.error)
                self.load()

        self._runner.submit(lambda: self._api.delete_bookmark(self._slug, bookmark_id), handle)

    def toggle(self, page: int) -> None:
        """Remove the page's bookmark if there is one, otherwise add one."""
        if page in self._pending_pages:
            LOG.debug("Bookmark on page %s is still being created; ignoring toggle", page)
            return
        existing = self.bookmark_for_page(page)
        if existing is not None:
            self.remove(existing.id)
        else:
            self.add(page)

    def search(self, term: str) -> List[Bookmark]:
        """Bookmarks whose note contains the term (any case) or whose page number does."""
        needle = (term or "").strip().lower()
        if not needle:
            return self.list()
        return [
            bookmark
            for bookmark in self.list()
            if needle in bookmark.note.lower() or needle in str(bookmark.page)
        ]

    def dispose(self) -> None:
        """Ignore any request that completes after the reader closed."""
        self._alive = False
