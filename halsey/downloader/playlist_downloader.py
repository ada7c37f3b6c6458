"""Recursive downloader that mirrors an HLS playlist tree onto disk."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Set, Tuple
from urllib.parse import urldefrag

from ..exceptions import CyclicPlaylistError, InvalidReferenceError, UnsupportedPlaylistKindError
from ..models import MasterPlaylist, MediaPlaylist, MirrorSummary, ResolvedTarget, Segment
from ..utils.file_utils import write_file
from ..utils.http_client import HttpClient
from .m3u8_parser import M3U8Parser
from .reference_resolver import resolve_reference

IDENTITY_KEY_FORMAT = "identity"


class PlaylistDownloader:
    """Mirrors a playlist and everything it references.

    Master playlists are walked variant by variant, each variant's
    alternative renditions first, then the variant stream itself, then any
    I-frame variants. Media playlists have their segments (plus key and
    initialization-section files) fetched as leaves. The first error at any
    depth aborts the whole mirror.
    """

    def __init__(
        self,
        http_client: HttpClient,
        parser: Optional[M3U8Parser] = None,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.workers = workers
        self._http_client = http_client
        self._parser = parser or M3U8Parser()

    def download(self, url: str, output_path: str) -> MirrorSummary:
        summary = MirrorSummary()
        self._traverse(url, output_path, (), summary)
        return summary

    def _traverse(
        self,
        url: str,
        output_path: str,
        ancestors: Tuple[str, ...],
        summary: MirrorSummary,
    ) -> None:
        playlist_key, _ = urldefrag(url)
        if playlist_key in ancestors:
            logging.error("Playlist %s references one of its own ancestors", url)
            raise CyclicPlaylistError(url)
        ancestors = ancestors + (playlist_key,)

        logging.info("Downloading playlist %s", url)
        content = self._http_client.fetch_bytes(url)
        write_file(output_path, content)
        summary.playlists.append(output_path)

        document = self._parser.parse(content, url)
        if isinstance(document, MasterPlaylist):
            logging.info("Saved master playlist to %s (%s variants)", output_path, len(document.variants))
            self._download_master(document, url, output_path, ancestors, summary)
        elif isinstance(document, MediaPlaylist):
            logging.info("Saved media playlist to %s (%s segments)", output_path, len(document.segments))
            self._download_media(document, url, output_path, summary)
        else:
            raise UnsupportedPlaylistKindError(f"Unknown playlist type at {url}")

    def _download_master(
        self,
        document: MasterPlaylist,
        url: str,
        output_path: str,
        ancestors: Tuple[str, ...],
        summary: MirrorSummary,
    ) -> None:
        for variant in document.variants:
            if variant is None:
                continue

            for alternative in variant.alternatives:
                if alternative is None or not alternative.uri:
                    logging.debug("Skipping alternative without URI in %s", url)
                    continue
                target = resolve_reference(url, output_path, alternative.uri)
                logging.info("Downloading %s rendition %s", alternative.type or "alternative", alternative.uri)
                self._traverse(target.url, target.output_path, ancestors, summary)

            if not variant.uri:
                logging.debug("Skipping variant without URI in %s", url)
                continue
            target = resolve_reference(url, output_path, variant.uri)
            logging.info("Downloading variant %s (bandwidth=%s)", variant.uri, variant.bandwidth)
            self._traverse(target.url, target.output_path, ancestors, summary)

        for variant in document.iframe_variants:
            if variant is None or not variant.uri:
                continue
            target = resolve_reference(url, output_path, variant.uri)
            logging.info("Downloading I-frame variant %s", variant.uri)
            self._traverse(target.url, target.output_path, ancestors, summary)

    def _download_media(
        self,
        document: MediaPlaylist,
        url: str,
        output_path: str,
        summary: MirrorSummary,
    ) -> None:
        if self.workers > 1:
            plan = list(self._iter_media_targets(document, url, output_path))
            asyncio.run(self._download_concurrently(plan))
            summary.media_files.extend(target.output_path for target in plan)
            return

        for target in self._iter_media_targets(document, url, output_path):
            logging.info("Downloading segment %s", target.url)
            self._http_client.download_file(target.url, target.output_path)
            summary.media_files.append(target.output_path)

    def _iter_media_targets(self, document: MediaPlaylist, url: str, output_path: str):
        """Yields leaf targets lazily in document order.

        Each output path is yielded once, so byte-range segments sharing one
        file fetch it a single time. Keys and initialization sections come
        right before the first segment that needs them; ones that cannot be
        mirrored (DRM key systems, other hosts) are skipped.
        """

        seen_paths: Set[str] = set()
        for index, segment in enumerate(document.segments):
            if segment is None or not segment.uri:
                logging.debug("Skipping segment #%s without URI in %s", index, url)
                continue
            targets = (
                self._resolve_key(segment, url, output_path),
                self._resolve_side_file(segment.init_section_uri, url, output_path),
                resolve_reference(url, output_path, segment.uri),
            )
            for target in targets:
                if target is None or target.output_path in seen_paths:
                    continue
                seen_paths.add(target.output_path)
                yield target

    def _resolve_key(self, segment: Segment, url: str, output_path: str) -> Optional[ResolvedTarget]:
        if not segment.key_uri:
            return None
        if segment.key_format and segment.key_format.lower() != IDENTITY_KEY_FORMAT:
            logging.debug("Skipping %s key %s in %s", segment.key_format, segment.key_uri, url)
            return None
        return self._resolve_side_file(segment.key_uri, url, output_path)

    @staticmethod
    def _resolve_side_file(uri: Optional[str], url: str, output_path: str) -> Optional[ResolvedTarget]:
        if not uri:
            return None
        try:
            return resolve_reference(url, output_path, uri)
        except InvalidReferenceError as exc:
            logging.debug("Skipping side file in %s: %s", url, exc)
            return None

    async def _download_concurrently(self, plan: List[ResolvedTarget]) -> None:
        if not plan:
            return

        sem = asyncio.Semaphore(self.workers)
        tasks = [self._download_single(sem, target) for target in plan]
        try:
            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            await self._http_client.aclose()

        for result in results:
            if isinstance(result, BaseException):
                raise result

    async def _download_single(self, sem: asyncio.Semaphore, target: ResolvedTarget) -> None:
        async with sem:
            logging.info("Downloading segment %s", target.url)
            await self._http_client.download_stream(target.url, target.output_path)
