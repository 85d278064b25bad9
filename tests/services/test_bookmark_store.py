"""Unit tests for BookmarkStore."""

from unittest.mock import MagicMock

import pytest

from comic_reader.core import Bookmark, DuplicateBookmarkError, NetworkError
from comic_reader.io import ApiResult, ComicApiClient
from comic_reader.services import BookmarkStore, ImmediateRequestRunner

SLUG = "space-cats"


def failure():
    return ApiResult(error=NetworkError("offline"))


@pytest.fixture
def server_bookmarks():
    return [
        Bookmark(id="b12", page=12, note=""),
        Bookmark(id="b3", page=3, note="Interesting scene here"),
        Bookmark(id="b7", page=7, note="Great artwork"),
    ]


@pytest.fixture
def api(server_bookmarks):
    client = MagicMock(spec=ComicApiClient)
    client.list_bookmarks.return_value = ApiResult(data=list(server_bookmarks))
    return client


@pytest.fixture
def store(api):
    store = BookmarkStore(api, SLUG, ImmediateRequestRunner())
    store.load()
    return store


class TestLoadAndList:

    def test_list_is_ordered_by_page(self, store):
        assert [b.page for b in store.list()] == [3, 7, 12]
        assert store.loaded is True

    def test_load_failure_keeps_cache(self, store, api):
        api.list_bookmarks.return_value = failure()
        store.load()
        assert len(store.list()) == 3

    def test_load_emits_change(self, api):
        store = BookmarkStore(api, SLUG, ImmediateRequestRunner())
        changes = []
        store.bookmarks_changed.connect(lambda: changes.append(True))

        store.load()

        assert changes == [True]

    def test_constructor_guards(self, api):
        with pytest.raises(ValueError):
            BookmarkStore(api, "", ImmediateRequestRunner())
        with pytest.raises(ValueError):
            BookmarkStore(None, SLUG, ImmediateRequestRunner())


class TestAdd:

    def test_duplicate_page_rejected_without_request(self, store, api):
        store._bookmarks["b5"] = Bookmark(id="b5", page=5, note="")

        with pytest.raises(DuplicateBookmarkError) as excinfo:
            store.add(5, "note")

        assert excinfo.value.page == 5
        api.create_bookmark.assert_not_called()

    def test_add_inserts_server_record(self, store, api):
        api.create_bookmark.return_value = ApiResult(data=Bookmark(id="srv-1", page=5, note="test"))
        done = MagicMock()

        store.add(5, "test", on_done=done)

        api.create_bookmark.assert_called_once_with(SLUG, 5, "test")
        assert store.is_bookmarked(5)
        assert store.bookmark_for_page(5).id == "srv-1"
        done.assert_called_once_with(store.bookmark_for_page(5))

    def test_add_uses_default_note(self, store, api):
        api.create_bookmark.return_value = ApiResult(data=Bookmark(id="srv-2", page=9, note="Bookmark on page 9"))

        store.add(9)

        api.create_bookmark.assert_called_once_with(SLUG, 9, "Bookmark on page 9")

    def test_add_failure_leaves_cache_untouched(self, store, api):
        api.create_bookmark.return_value = failure()
        done = MagicMock()

        store.add(5, "test", on_done=done)

        assert not store.is_bookmarked(5)
        done.assert_called_once_with(None)


class TestUpdateAndRemove:

    def test_update_applies_locally_then_confirms(self, store, api):
        confirmed = Bookmark(id="b7", page=7, note="Great artwork!")
        api.update_bookmark.return_value = ApiResult(data=confirmed)

        store.update("b7", "Great artwork!")

        api.update_bookmark.assert_called_once_with(SLUG, "b7", "Great artwork!")
        assert store.bookmark_for_page(7) == confirmed

    def test_update_failure_reloads_from_server(self, store, api):
        api.update_bookmark.return_value = failure()
        api.list_bookmarks.reset_mock()

        store.update("b7", "changed locally")

        api.list_bookmarks.assert_called_once_with(SLUG)
        assert store.bookmark_for_page(7).note == "Great artwork"

    def test_update_unknown_id_is_ignored(self, store, api):
        store.update("nope", "x")
        api.update_bookmark.assert_not_called()

    def test_remove_applies_locally(self, store, api):
        api.delete_bookmark.return_value = ApiResult(data=None, status=204)

        store.remove("b3")

        api.delete_bookmark.assert_called_once_with(SLUG, "b3")
        assert not store.is_bookmarked(3)

    def test_remove_failure_restores_from_server(self, store, api):
        api.delete_bookmark.return_value = failure()

        store.remove("b3")

        assert store.is_bookmarked(3)

    def test_toggle_adds_then_removes(self, store, api):
        api.create_bookmark.return_value = ApiResult(data=Bookmark(id="srv-5", page=5, note="Bookmark on page 5"))
        api.delete_bookmark.return_value = ApiResult(data=None, status=204)

        store.toggle(5)
        assert store.is_bookmarked(5)

        store.toggle(5)
        assert not store.is_bookmarked(5)
        api.delete_bookmark.assert_called_once_with(SLUG, "srv-5")


class ManualRunner:
    """Holds submitted calls until the test completes them."""

    def __init__(self):
        self.pending = []

    def submit(self, call, on_result):
        self.pending.append((call, on_result))

    def complete_all(self):
        while self.pending:
            call, on_result = self.pending.pop(0)
            on_result(call())


class TestRequestsInFlight:

    @pytest.fixture
    def runner(self):
        return ManualRunner()

    @pytest.fixture
    def slow_store(self, api, runner):
        store = BookmarkStore(api, SLUG, runner)
        store.load()
        runner.complete_all()
        return store

    def test_double_toggle_sends_one_create(self, slow_store, api, runner):
        api.create_bookmark.return_value = ApiResult(data=Bookmark(id="srv-5", page=5, note=""))

        slow_store.toggle(5)
        slow_store.toggle(5)
        runner.complete_all()

        assert api.create_bookmark.call_count == 1
        assert [b.id for b in slow_store.list() if b.page == 5] == ["srv-5"]

    def test_add_while_create_pending_is_duplicate(self, slow_store, api, runner):
        slow_store.add(5)

        assert slow_store.is_bookmarked(5)
        with pytest.raises(DuplicateBookmarkError):
            slow_store.add(5)
        api.create_bookmark.assert_called_once()

    def test_failed_create_frees_the_page(self, slow_store, api, runner):
        api.create_bookmark.return_value = failure()
        slow_store.add(5)
        runner.complete_all()

        assert not slow_store.is_bookmarked(5)
        api.create_bookmark.return_value = ApiResult(data=Bookmark(id="srv-5", page=5, note=""))
        slow_store.add(5)
        runner.complete_all()
        assert slow_store.is_bookmarked(5)

    def test_late_load_keeps_add_confirmed_after_it_was_sent(self, slow_store, api, runner, server_bookmarks):
        api.list_bookmarks.return_value = ApiResult(data=list(server_bookmarks))
        api.create_bookmark.return_value = ApiResult(data=Bookmark(id="srv-5", page=5, note=""))

        slow_store.load()
        slow_store.add(5)
        # Deliver the add before the stale listing
        add_call, add_done = runner.pending.pop()
        add_done(add_call())
        runner.complete_all()

        assert [b.page for b in slow_store.list()] == [3, 5, 7, 12]

    def test_late_load_does_not_resurrect_removed_bookmark(self, slow_store, api, runner):
        api.delete_bookmark.return_value = ApiResult(data=None)

        slow_store.load()
        slow_store.remove("b7")
        runner.complete_all()

        assert [b.page for b in slow_store.list()] == [3, 12]


class TestSearch:

    def test_search_by_note(self, store):
        assert [b.page for b in store.search("artwork")] == [7]

    def test_search_is_case_insensitive(self, store):
        assert [b.page for b in store.search("INTERESTING")] == [3]

    def test_search_by_page_number(self, store):
        assert [b.page for b in store.search("7")] == [7]

    def test_page_number_substring(self, store):
        assert [b.page for b in store.search("1")] == [12]

    def test_empty_term_returns_everything(self, store):
        assert len(store.search("")) == 3


def test_results_after_dispose_are_ignored(api):
    pending = []

    class DeferredRunner:
        def submit(self, call, on_result):
            pending.append((call, on_result))

    store = BookmarkStore(api, SLUG, DeferredRunner())
    store.load()
    store.dispose()

    call, on_result = pending.pop()
    on_result(call())

    assert store.list() == []
    assert store.loaded is False
