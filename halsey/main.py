from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional
from urllib.parse import urlsplit

from dotenv import load_dotenv

from .downloader.playlist_downloader import PlaylistDownloader
from .exceptions import HalseyError, InvalidURLError
from .utils.http_client import HttpClient

load_dotenv()

DEFAULT_OUTPUT_DIR = "downloads"
DEFAULT_PLAYLIST_NAME = "index.m3u8"
SUPPORTED_SCHEMES = {"http", "https"}


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if not number > 0:
        raise argparse.ArgumentTypeError("must be greater than 0")
    return number


def validate_url(value: str) -> str:
    """Returns ``value`` when it is an absolute http(s) URL."""

    try:
        parsed = urlsplit(value)
    except ValueError as exc:
        raise InvalidURLError(f"Invalid playlist URL {value!r}: {exc}") from exc
    if parsed.scheme.lower() not in SUPPORTED_SCHEMES or not parsed.netloc:
        raise InvalidURLError(f"Invalid playlist URL {value!r}: expected an absolute http(s) URL")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="halsey",
        description="Halsey is a command line tool for downloading HLS streams from a given URL.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    download = subparsers.add_parser("download", help="Download a HLS stream", description="Download a HLS stream from a given URL")
    download.add_argument("url", help="URL of the master or media playlist")
    download.add_argument(
        "-d",
        "--directory",
        default=_env_str("OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
        help="Output directory",
    )
    download.add_argument(
        "--playlist-name",
        default=_env_str("PLAYLIST_NAME") or DEFAULT_PLAYLIST_NAME,
        help="File name for the root playlist inside the output directory",
    )
    download.add_argument(
        "--workers",
        type=_positive_int,
        default=_env_str("WORKERS") or "1",
        help="Number of concurrent segment downloads per media playlist",
    )
    download.add_argument(
        "--timeout",
        type=_positive_float,
        default=_env_str("TIMEOUT") or "10",
        help="HTTP timeout in seconds",
    )
    download.add_argument("--debug", action="store_true", default=_env_bool("DEBUG"), help="Enable debug logging")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def run_download(args: argparse.Namespace) -> int:
    try:
        url = validate_url(args.url)
    except InvalidURLError as exc:
        logging.error("%s", exc)
        return 1

    output = os.path.join(args.directory, args.playlist_name)
    logging.info("Downloading HLS stream %s", url)

    with HttpClient(timeout=args.timeout) as http_client:
        downloader = PlaylistDownloader(http_client, workers=args.workers)
        try:
            summary = downloader.download(url, output)
        except HalseyError as exc:
            logging.error("Aborting download: %s", exc)
            return 1

    logging.info(
        "Download complete: %s (%s playlists, %s media files)",
        output,
        len(summary.playlists),
        len(summary.media_files),
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.debug)

    if args.command == "download":
        return run_download(args)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
