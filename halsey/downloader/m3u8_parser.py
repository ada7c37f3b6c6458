"""Adapts the m3u8 library's playlist objects into typed documents."""

from __future__ import annotations

import codecs
from typing import List, Optional

import m3u8

from ..exceptions import PlaylistParseError, UnsupportedPlaylistKindError
from ..models import Alternative, MasterPlaylist, MediaPlaylist, PlaylistDocument, Segment, Variant

PLAYLIST_HEADER = "#EXTM3U"


class M3U8Parser:
    """Turns raw playlist bytes into a master or media playlist document."""

    def parse(self, content: bytes, playlist_url: str) -> PlaylistDocument:
        text = self._decode(content, playlist_url)
        first_line = next((line.strip() for line in text.splitlines() if line.strip()), "")
        if first_line != PLAYLIST_HEADER:
            raise PlaylistParseError(playlist_url, f"missing {PLAYLIST_HEADER} header")

        try:
            playlist = m3u8.M3U8(text)
        except (m3u8.ParseError, ValueError, KeyError, IndexError, TypeError) as exc:
            raise PlaylistParseError(playlist_url, str(exc) or type(exc).__name__) from exc

        if playlist.is_variant:
            if playlist.segments:
                raise UnsupportedPlaylistKindError(
                    f"Playlist {playlist_url} mixes variant streams and media segments"
                )
            return self._build_master(playlist)
        return self._build_media(playlist)

    @staticmethod
    def _decode(content: bytes, playlist_url: str) -> str:
        if content.startswith(codecs.BOM_UTF8):
            content = content[len(codecs.BOM_UTF8):]
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PlaylistParseError(playlist_url, f"not UTF-8 text ({exc.reason})") from exc

    def _build_master(self, playlist: m3u8.M3U8) -> MasterPlaylist:
        variants: List[Optional[Variant]] = []
        for stream in playlist.playlists:
            if stream is None:
                variants.append(None)
                continue
            info = stream.stream_info
            variants.append(
                Variant(
                    uri=stream.uri,
                    bandwidth=info.bandwidth,
                    codecs=info.codecs,
                    resolution=_format_resolution(info.resolution),
                    alternatives=[self._build_alternative(media) for media in stream.media],
                )
            )

        iframe_variants: List[Optional[Variant]] = []
        for stream in playlist.iframe_playlists:
            info = stream.iframe_stream_info
            iframe_variants.append(
                Variant(
                    uri=stream.uri,
                    bandwidth=info.bandwidth,
                    codecs=info.codecs,
                    resolution=_format_resolution(info.resolution),
                )
            )
        return MasterPlaylist(variants=variants, iframe_variants=iframe_variants)

    @staticmethod
    def _build_alternative(media) -> Optional[Alternative]:
        if media is None:
            return None
        return Alternative(uri=media.uri, type=media.type, group_id=media.group_id, name=media.name)

    @staticmethod
    def _build_media(playlist: m3u8.M3U8) -> MediaPlaylist:
        segments: List[Optional[Segment]] = []
        for segment in playlist.segments:
            init_section = segment.init_section
            key = segment.key
            segments.append(
                Segment(
                    uri=segment.uri,
                    duration=segment.duration,
                    title=segment.title,
                    byterange=segment.byterange,
                    init_section_uri=init_section.uri if init_section else None,
                    key_uri=key.uri if key else None,
                    key_format=key.keyformat if key else None,
                )
            )
        return MediaPlaylist(segments=segments)


def _format_resolution(resolution) -> Optional[str]:
    if not resolution:
        return None
    width, height = resolution
    return f"{width}x{height}"
