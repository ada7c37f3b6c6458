"""Shared fixtures: an in-memory HTTP client and sample playlists."""

from pathlib import Path

import pytest

from halsey.exceptions import FetchError
from halsey.utils.file_utils import write_file


class FakeHttpClient:
    """Serves a fixed URL -> bytes map and records every fetch in order."""

    def __init__(self, resources):
        self.resources = dict(resources)
        self.fetched = []
        self.closed_async = False

    def fetch_bytes(self, url):
        self.fetched.append(url)
        if url not in self.resources:
            raise FetchError(url, "404 Client Error: Not Found")
        return self.resources[url]

    def download_file(self, url, dest_path):
        data = self.fetch_bytes(url)
        write_file(dest_path, data)
        return len(data)

    async def download_stream(self, url, dest_path):
        return self.download_file(url, dest_path)

    async def aclose(self):
        self.closed_async = True


def media_playlist(*uris, header="#EXTM3U"):
    lines = [header, "#EXT-X-VERSION:3", "#EXT-X-TARGETDURATION:10"]
    for uri in uris:
        lines.append("#EXTINF:10.0,")
        lines.append(uri)
    lines.append("#EXT-X-ENDLIST")
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def fake_http():
    """Factory building a FakeHttpClient from a URL -> bytes mapping."""

    def _create(resources):
        return FakeHttpClient(resources)

    return _create


@pytest.fixture
def make_media_playlist():
    """Builds VOD media playlist bytes listing the given segment URIs."""

    return media_playlist


@pytest.fixture
def output_root(tmp_path) -> Path:
    return tmp_path / "downloads"


@pytest.fixture
def master_resources():
    """A master playlist with one audio rendition and two variants."""

    base = "https://cdn.example.com/show"
    master = (
        "#EXTM3U\n"
        '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aud",NAME="English",LANGUAGE="en",URI="audio/en.m3u8"\n'
        '#EXT-X-STREAM-INF:BANDWIDTH=1280000,CODECS="avc1.4d401f,mp4a.40.2",AUDIO="aud"\n'
        "low/index.m3u8\n"
        "#EXT-X-STREAM-INF:BANDWIDTH=2560000,RESOLUTION=1280x720\n"
        "high/index.m3u8\n"
    ).encode("utf-8")
    return {
        f"{base}/master.m3u8": master,
        f"{base}/audio/en.m3u8": media_playlist("seg0.aac"),
        f"{base}/audio/seg0.aac": b"audio-0",
        f"{base}/low/index.m3u8": media_playlist("seg0.ts", "seg1.ts"),
        f"{base}/low/seg0.ts": b"low-0",
        f"{base}/low/seg1.ts": b"low-1",
        f"{base}/high/index.m3u8": media_playlist("seg0.ts"),
        f"{base}/high/seg0.ts": b"high-0",
    }
