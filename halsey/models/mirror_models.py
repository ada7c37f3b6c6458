"""Models produced while mirroring a playlist tree."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class ResolvedTarget(BaseModel):
    """Where a playlist reference is fetched from and written to."""

    url: str
    output_path: str


class MirrorSummary(BaseModel):
    """Files written by a completed mirror, in write order."""

    playlists: List[str] = Field(default_factory=list)
    media_files: List[str] = Field(default_factory=list)
