"""Run-wide diagnostic collection and banner-framed reporting."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import TextIO

from sassinline.model.diagnostic import Diagnostic

BANNER_START = "▼"
BANNER_STOP = "▲"


def banner(char: str, width: int, label: str = "") -> str:
    """Return a rule of *char* repeated *width* times, with *label* set in after two chars.

    A width of zero (or less) gives an empty string.
    """
    if width <= 0:
        return ""
    if not label:
        return char * width
    text = f"{char * 2} {label} "
    return text + char * max(width - len(text), 0)


class DiagnosticLog:
    """Accumulates diagnostics for a whole run, dropping exact duplicates."""

    def __init__(self) -> None:
        self._entries: list[Diagnostic] = []
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def add(self, diagnostic: Diagnostic) -> bool:
        """Record *diagnostic*; returns ``False`` if an identical one was already recorded."""
        key = str(diagnostic)
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            self._entries.append(diagnostic)
            return True

    def __iter__(self) -> Iterator[Diagnostic]:
        with self._lock:
            return iter(list(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __bool__(self) -> bool:
        return len(self) > 0

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._seen.clear()

    def render(self, banner_width: int = 0) -> str:
        """Render every entry, blank-line separated, between banner rules.

        Returns an empty string when there is nothing to report.
        """
        entries = list(self)
        if not entries:
            return ""
        start = f"{banner(BANNER_START, banner_width)}\n" if banner_width > 0 else ""
        stop = f"{banner(BANNER_STOP, banner_width)}\n" if banner_width > 0 else ""
        body = "\n".join(f"{entry}\n" for entry in entries)
        return f"{start}\n{body}\n{stop}"

    def flush(self, stream: TextIO, banner_width: int = 0) -> str:
        """Write the rendered report to *stream* once and clear the log."""
        text = self.render(banner_width)
        if text:
            stream.write(text)
            stream.flush()
        self.clear()
        return text
