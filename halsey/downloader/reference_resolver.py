"""Resolves playlist references into fetch URLs and mirrored output paths."""

from __future__ import annotations

import logging
import os
import re
from urllib.parse import urljoin, urlsplit

from ..exceptions import InvalidReferenceError, UnsupportedAbsoluteReferenceError
from ..models import ResolvedTarget

CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
SCHEME_PREFIX = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
FIRST_SEGMENT = re.compile(r"^[^/?#]*")


def resolve_reference(base_url: str, base_output_path: str, reference: str) -> ResolvedTarget:
    """Resolve ``reference`` found in the playlist at ``base_url``.

    The fetch URL follows RFC 3986 relative resolution against ``base_url``.
    The output path re-applies the raw reference under the directory that
    holds ``base_output_path``, so ``variant/stream.m3u8`` referencing
    ``seg_0.ts`` lands at ``variant/seg_0.ts``.

    Raises ``UnsupportedAbsoluteReferenceError`` for references that name
    their own scheme or host and ``InvalidReferenceError`` for anything that
    is not a URI reference at all.
    """

    if not reference:
        raise InvalidReferenceError(reference, "empty reference")
    if CONTROL_CHARS.search(reference):
        raise InvalidReferenceError(reference, "contains control characters")
    if BAD_PERCENT_ESCAPE.search(reference):
        raise InvalidReferenceError(reference, "malformed percent-escape")
    try:
        parsed = urlsplit(reference)
        # Accessing the port validates it.
        parsed.port
    except ValueError as exc:
        raise InvalidReferenceError(reference, str(exc)) from exc

    if SCHEME_PREFIX.match(reference) or parsed.netloc:
        raise UnsupportedAbsoluteReferenceError(reference)
    if ":" in FIRST_SEGMENT.match(reference).group(0):
        raise InvalidReferenceError(reference, "first path segment cannot contain a colon")

    url = urljoin(base_url, reference)
    # Root-relative references still land under the parent playlist folder.
    relative_path = reference.lstrip("/")
    output_path = os.path.normpath(os.path.join(os.path.dirname(base_output_path), relative_path))
    logging.debug("Resolved %s -> %s (%s)", reference, url, output_path)
    return ResolvedTarget(url=url, output_path=output_path)
