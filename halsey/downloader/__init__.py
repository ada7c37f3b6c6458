"""Playlist parsing, reference resolution and recursive mirroring."""

from .m3u8_parser import M3U8Parser
from .playlist_downloader import PlaylistDownloader
from .reference_resolver import resolve_reference

__all__ = ["M3U8Parser", "PlaylistDownloader", "resolve_reference"]
