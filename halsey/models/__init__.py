"""Data models for parsed playlists and mirror results."""

from .mirror_models import MirrorSummary, ResolvedTarget
from .playlist_models import (
    Alternative,
    MasterPlaylist,
    MediaPlaylist,
    PlaylistDocument,
    Segment,
    Variant,
)

__all__ = [
    "Alternative",
    "Variant",
    "Segment",
    "MasterPlaylist",
    "MediaPlaylist",
    "PlaylistDocument",
    "ResolvedTarget",
    "MirrorSummary",
]
