"""Filesystem helpers for writing mirrored files."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..exceptions import WriteError


def ensure_directory(path: str) -> str:
    """Creates a directory (and its parents) if needed."""

    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logging.error("Failed to create directory %s: %s", path, exc)
        raise WriteError(path, str(exc)) from exc
    return path


def ensure_parent_directory(file_path: str) -> str:
    """Creates the directory that will contain ``file_path``."""

    return ensure_directory(os.path.dirname(file_path) or ".")


def write_file(path: str, data: bytes) -> None:
    """Writes ``data`` verbatim to ``path``, creating parent folders first."""

    ensure_parent_directory(path)
    try:
        with open(path, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        logging.error("Failed to write %s: %s", path, exc)
        raise WriteError(path, str(exc)) from exc
