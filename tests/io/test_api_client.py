"""Unit tests for ComicApiClient."""

from unittest.mock import MagicMock

import pytest
import requests

from comic_reader.core import Bookmark, NetworkError, ProgressRecord
from comic_reader.io import ComicApiClient


def make_response(status_code=200, payload=None, json_error=False):
    response = MagicMock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def http_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http_session):
    return ComicApiClient("https://comics.example/", csrf_token="tok-123", session=http_session, timeout=5)


class TestRequests:

    def test_list_bookmarks_sends_read_headers(self, client, http_session):
        http_session.request.return_value = make_response(payload={"data": [
            {"id": 1, "page": 3, "note": "Interesting scene here"},
            {"id": 2, "page_number": 7, "note": "Great artwork"},
        ]})

        result = client.list_bookmarks("space-cats")

        assert not result.is_error
        assert [b.page for b in result.data] == [3, 7]
        assert all(isinstance(b, Bookmark) for b in result.data)

        args, kwargs = http_session.request.call_args
        assert args == ("GET", "https://comics.example/api/comics/space-cats/bookmarks")
        assert kwargs["headers"]["Accept"] == "application/json"
        assert kwargs["headers"]["X-Requested-With"] == "XMLHttpRequest"
        assert "X-CSRF-TOKEN" not in kwargs["headers"]
        assert kwargs["timeout"] == 5

    def test_create_bookmark_posts_page_number_and_csrf(self, client, http_session):
        http_session.request.return_value = make_response(
            status_code=201, payload={"id": 9, "page_number": 5, "note": "test"}
        )

        result = client.create_bookmark("space-cats", 5, "test")

        assert result.data.id == "9"
        args, kwargs = http_session.request.call_args
        assert args[0] == "POST"
        assert kwargs["json"] == {"page_number": 5, "note": "test"}
        assert kwargs["headers"]["X-CSRF-TOKEN"] == "tok-123"
        assert kwargs["headers"]["Content-Type"] == "application/json"

    def test_update_bookmark_patches_note(self, client, http_session):
        http_session.request.return_value = make_response(payload={"id": 9, "page": 5, "note": "edited"})

        result = client.update_bookmark("space-cats", "9", "edited")

        assert result.data.note == "edited"
        args, kwargs = http_session.request.call_args
        assert args == ("PATCH", "https://comics.example/api/comics/space-cats/bookmarks/9")
        assert kwargs["json"] == {"note": "edited"}

    def test_delete_bookmark_ignores_body(self, client, http_session):
        response = make_response(status_code=204, json_error=True)
        http_session.request.return_value = response

        result = client.delete_bookmark("space-cats", "9")

        assert not result.is_error
        assert result.data is None
        assert http_session.request.call_args.args[0] == "DELETE"
        assert http_session.request.call_args.kwargs["headers"]["X-CSRF-TOKEN"] == "tok-123"

    def test_update_progress_payload(self, client, http_session):
        http_session.request.return_value = make_response(payload={"current_page": 5, "total_pages": 20})

        result = client.update_progress("space-cats", 5, 20, reading_time_minutes=3)

        assert isinstance(result.data, ProgressRecord)
        kwargs = http_session.request.call_args.kwargs
        assert kwargs["json"] == {"current_page": 5, "total_pages": 20, "reading_time_minutes": 3}

    def test_missing_csrf_token_sends_empty_header(self, http_session):
        client = ComicApiClient("https://comics.example", session=http_session)
        http_session.request.return_value = make_response(payload={"current_page": 1, "total_pages": 2})

        client.update_progress("x", 1, 2)

        assert http_session.request.call_args.kwargs["headers"]["X-CSRF-TOKEN"] == ""

    def test_slug_and_id_are_quoted(self, client, http_session):
        http_session.request.return_value = make_response(status_code=204)

        client.delete_bookmark("odd slug", "a/b")

        url = http_session.request.call_args.args[1]
        assert url == "https://comics.example/api/comics/odd%20slug/bookmarks/a%2Fb"


class TestFailures:

    def test_connection_error_becomes_network_error(self, client, http_session):
        http_session.request.side_effect = requests.ConnectionError("refused")

        result = client.get_progress("space-cats")

        assert result.is_error
        assert isinstance(result.error, NetworkError)
        assert result.status is None

    def test_non_2xx_is_network_error_with_status(self, client, http_session):
        http_session.request.return_value = make_response(status_code=500, payload={"message": "boom"})

        result = client.get_progress("space-cats")

        assert result.is_error
        assert result.error.status == 500
        assert "HTTP 500" in str(result.error)

    def test_non_json_body_is_error(self, client, http_session):
        http_session.request.return_value = make_response(json_error=True)

        result = client.list_bookmarks("space-cats")

        assert result.is_error

    def test_malformed_payload_is_error(self, client, http_session):
        http_session.request.return_value = make_response(payload={"unexpected": True})

        result = client.get_progress("space-cats")

        assert result.is_error


def test_empty_base_url_rejected():
    with pytest.raises(ValueError):
        ComicApiClient("")


def test_session_cookie_is_stored():
    client = ComicApiClient("https://comics.example", session=requests.Session())
    client.set_session_cookie("laravel_session", "abc")
    assert client.session.cookies.get("laravel_session") == "abc"
