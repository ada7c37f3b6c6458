"""Errors raised while mirroring an HLS playlist tree."""

from __future__ import annotations


class HalseyError(Exception):
    """Base exception for all mirror failures."""


class InvalidURLError(HalseyError):
    """Raised when the root playlist URL is not a well-formed absolute URL."""


class FetchError(HalseyError):
    """Raised when a playlist or segment cannot be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class WriteError(HalseyError):
    """Raised when downloaded bytes cannot be written to disk."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path
        self.reason = reason


class PlaylistParseError(HalseyError):
    """Raised when fetched bytes are not a valid m3u8 playlist."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to parse playlist {url}: {reason}")
        self.url = url
        self.reason = reason


class InvalidReferenceError(HalseyError):
    """Raised when a playlist reference is not a valid URI reference."""

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Invalid reference {reference!r}: {reason}")
        self.reference = reference
        self.reason = reason


class UnsupportedAbsoluteReferenceError(InvalidReferenceError):
    """Raised for references that carry their own scheme or host."""

    def __init__(self, reference: str) -> None:
        super().__init__(reference, "absolute references are not supported")


class UnsupportedPlaylistKindError(HalseyError):
    """Raised when a playlist is neither a master nor a media playlist."""


class CyclicPlaylistError(HalseyError):
    """Raised when a playlist references itself or one of its ancestors."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Playlist {url} references itself through its own variants")
        self.url = url
