"""Pydantic models describing a parsed master or media playlist.

Only the ``uri`` fields drive the mirror; the remaining attributes are kept
for log output.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Alternative(BaseModel):
    """An EXT-X-MEDIA rendition attached to a variant stream."""

    uri: Optional[str] = None
    type: Optional[str] = None
    group_id: Optional[str] = None
    name: Optional[str] = None


class Variant(BaseModel):
    """A variant stream entry of a master playlist."""

    uri: Optional[str] = None
    bandwidth: Optional[int] = None
    codecs: Optional[str] = None
    resolution: Optional[str] = None
    alternatives: List[Optional[Alternative]] = Field(default_factory=list)


class Segment(BaseModel):
    """A media segment plus the side resources it needs for playback."""

    uri: Optional[str] = None
    duration: Optional[float] = None
    title: Optional[str] = None
    byterange: Optional[str] = None
    init_section_uri: Optional[str] = None
    key_uri: Optional[str] = None
    key_format: Optional[str] = None


class MasterPlaylist(BaseModel):
    kind: Literal["master"] = "master"
    variants: List[Optional[Variant]] = Field(default_factory=list)
    iframe_variants: List[Optional[Variant]] = Field(default_factory=list)


class MediaPlaylist(BaseModel):
    kind: Literal["media"] = "media"
    segments: List[Optional[Segment]] = Field(default_factory=list)


PlaylistDocument = Annotated[Union[MasterPlaylist, MediaPlaylist], Field(discriminator="kind")]
