"""Shared helpers."""

from comic_reader.utils.logging import get_logger

__all__ = ["get_logger"]
