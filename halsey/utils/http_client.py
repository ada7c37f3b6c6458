"""Shared HTTP helpers for fetching playlists and media segments."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Dict, Optional

import aiohttp
import requests

from .. import __version__
from ..exceptions import FetchError, WriteError
from .file_utils import ensure_parent_directory

USER_AGENT = f"halsey/{__version__}"

DEFAULT_HEADERS: Dict[str, str] = {
    "user-agent": USER_AGENT,
    "accept": "*/*",
}

CHUNK_SIZE = 1 << 14


class HttpClient:
    """Fetches playlists and segments with a shared session and timeout."""

    def __init__(self, timeout: float = 10, headers: Optional[Dict[str, str]] = None) -> None:
        self.timeout = timeout
        self._headers = DEFAULT_HEADERS.copy()
        if headers:
            self._headers.update(headers)

        self._session = requests.Session()
        self._session.headers.update(self._headers)

        self._async_session: Optional[aiohttp.ClientSession] = None
        self._async_lock: Optional[asyncio.Lock] = None
        self._async_loop: Optional[asyncio.AbstractEventLoop] = None

    def fetch_bytes(self, url: str) -> bytes:
        """Fetch a resource fully into memory (playlists)."""

        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.content
        except requests.RequestException as exc:
            logging.error("Download of %s failed: %s", url, exc)
            raise FetchError(url, str(exc)) from exc

    def download_file(self, url: str, dest_path: str) -> int:
        """Stream a resource (segment) to disk, returning the bytes written."""

        written = 0
        created = False
        try:
            with self._session.get(url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                ensure_parent_directory(dest_path)
                with open(dest_path, "wb") as file_obj:
                    created = True
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            file_obj.write(chunk)
                            written += len(chunk)
        except requests.RequestException as exc:
            logging.error("Download of %s failed: %s", url, exc)
            if created:
                _discard_partial(dest_path)
            raise FetchError(url, str(exc)) from exc
        except OSError as exc:
            logging.error("Failed to write %s: %s", dest_path, exc)
            if created:
                _discard_partial(dest_path)
            raise WriteError(dest_path, str(exc)) from exc
        return written

    async def download_stream(self, url: str, dest_path: str) -> int:
        """Asynchronously stream a resource (segment) to disk."""

        session = await self._get_async_session()
        written = 0
        created = False
        try:
            async with session.get(url) as resp:
                resp.raise_for_status()
                ensure_parent_directory(dest_path)
                with open(dest_path, "wb") as file_obj:
                    created = True
                    async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                        if chunk:
                            file_obj.write(chunk)
                            written += len(chunk)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logging.error("Download of %s failed: %s", url, exc)
            if created:
                _discard_partial(dest_path)
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        except OSError as exc:
            logging.error("Failed to write %s: %s", dest_path, exc)
            if created:
                _discard_partial(dest_path)
            raise WriteError(dest_path, str(exc)) from exc
        return written

    async def _get_async_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        if self._async_session:
            if (
                self._async_session.closed
                or not self._async_loop
                or self._async_loop.is_closed()
                or self._async_loop is not current_loop
            ):
                await self.aclose()

        if self._async_lock is None or self._async_loop is not current_loop:
            self._async_lock = asyncio.Lock()

        async with self._async_lock:
            if self._async_session and not self._async_session.closed:
                return self._async_session
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            connector = aiohttp.TCPConnector(limit=0)
            self._async_session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector,
                headers=self._headers.copy(),
            )
            self._async_loop = current_loop
        return self._async_session

    async def aclose(self) -> None:
        """Closes the aiohttp session bound to the running event loop."""

        if self._async_session and not self._async_session.closed:
            try:
                await self._async_session.close()
            except RuntimeError as exc:
                logging.debug("Ignoring aiohttp session shutdown error: %s", exc)
        self._async_session = None
        self._async_loop = None
        self._async_lock = None

    def close(self) -> None:
        self._session.close()

        if self._async_session and not self._async_session.closed:
            try:
                asyncio.run(self.aclose())
            except RuntimeError as exc:
                logging.debug("Unable to close aiohttp session cleanly: %s", exc)
        self._async_session = None
        self._async_loop = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


def _discard_partial(path: str) -> None:
    """Removes a file left truncated by a failed download."""

    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError as exc:
        logging.warning("Unable to remove partial file %s: %s", path, exc)
