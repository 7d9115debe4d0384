"""Diagnostic model: compiler errors normalised to ``file:line:col: message``."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

UNPARSED_MARKER = "could not parse compiler error"

# Classic libsass / node-sass form: "src/app.scss:12: error: message"
_LEGACY_RE = re.compile(r"(?P<file>.*):(?P<line>\d+):\s*error:\s*(?P<message>.*)")

# libsass formatted form:
#   Error: Undefined variable: "$x".
#           on line 3:10 of src/app.scss
_LIBSASS_RE = re.compile(
    r"Error:\s*(?P<message>.*?)\s*\n\s*on line (?P<line>\d+)(?::\d+)? of (?P<file>[^\n]+)",
    re.DOTALL,
)


@dataclass(frozen=True)
class Diagnostic:
    """A single compile failure attributed to a source file, when possible.

    Attributes:
        message: The compiler's message, or its full raw text when unparsed.
        file: Absolute path of the offending file, if the text named one.
        line: 1-based line number, if known.
    """

    message: str
    file: str | None = None
    line: int | None = None

    @property
    def parsed(self) -> bool:
        return self.file is not None and self.line is not None

    def __str__(self) -> str:
        if self.parsed:
            return f"{self.file}:{self.line}:0: {self.message}"
        return f"{UNPARSED_MARKER}\n{self.message}"


def parse_diagnostic(text: str, root: str | None = None) -> Diagnostic:
    """Parse compiler error text, resolving the file name against *root*.

    Text matching neither known pattern is kept verbatim so that no compiler
    error is dropped.
    """
    root = root or os.getcwd()
    match = _LIBSASS_RE.search(text) or _LEGACY_RE.search(text)
    if not match:
        return Diagnostic(message=text.strip())
    file = os.path.abspath(os.path.join(root, match.group("file").strip()))
    message = " ".join(match.group("message").split())
    return Diagnostic(message=message, file=file, line=int(match.group("line")))
