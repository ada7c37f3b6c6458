"""Utility helpers for HTTP and filesystem operations."""

from .file_utils import ensure_directory, ensure_parent_directory, write_file
from .http_client import HttpClient

__all__ = ["HttpClient", "ensure_directory", "ensure_parent_directory", "write_file"]
