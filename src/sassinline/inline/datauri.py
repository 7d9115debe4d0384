"""``url(data:...)`` values for inlined stylesheet assets."""

from __future__ import annotations

import base64
import binascii
import mimetypes
import os
import re

# Scheme-prefixed references ("data:", "https:") never name a local file.
# Single-letter schemes are left out so Windows drives ("C:") still count.
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]+:")
_DATA_URL_RE = re.compile(
    r"""^(?:url\(\s*['"]?)?data:(?P<media>[^;,]*)(?:;[^;,]*)*?;base64,(?P<payload>[^'")\s]*)['"]?\s*\)?$"""
)

# Web asset types the platform mimetypes table is unreliable about.
_MEDIA_TYPES = {
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".ico": "image/x-icon",
    ".cur": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".eot": "application/vnd.ms-fontobject",
}


def media_type_for(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    if ext in _MEDIA_TYPES:
        return _MEDIA_TYPES[ext]
    mime, _ = mimetypes.guess_type(path)
    return mime or "application/octet-stream"


def css_data_url(data: bytes, media_type: str) -> str:
    """Wrap *data* as an unquoted ``url(data:<media_type>;base64,...)`` value."""
    payload = base64.b64encode(data).decode("ascii")
    return f"url(data:{media_type};base64,{payload})"


def parse_css_data_url(value: str) -> tuple[bytes, str]:
    """Return ``(bytes, media_type)`` from a base64 data URL, bare or ``url()``-wrapped.

    Raises :class:`ValueError` for anything else.
    """
    match = _DATA_URL_RE.match(value.strip())
    if not match:
        raise ValueError(f"Not a base64 data URL: {value[:60]!r}")
    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Bad base64 payload in data URL: {exc}") from exc
    return data, match.group("media")


def is_remote(reference: str) -> bool:
    """True for scheme-prefixed and protocol-relative (``//host``) references."""
    return reference.startswith("//") or _SCHEME_RE.match(reference) is not None
