"""I/O layer - Access to the comic platform's REST API."""

from .api_client import ApiResult, ComicApiClient

__all__ = ["ApiResult", "ComicApiClient"]
