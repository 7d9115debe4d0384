"""Compile unit model: one stylesheet in, one CSS file and one map out."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class OutputStyle(Enum):
    """Rendering modes supported by libsass."""

    NESTED = "nested"
    EXPANDED = "expanded"
    COMPACT = "compact"
    COMPRESSED = "compressed"

    @classmethod
    def parse(cls, value: str | OutputStyle) -> OutputStyle:
        """Coerce a style name to an :class:`OutputStyle`, rejecting unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(style.value for style in cls)
            raise ValueError(
                f"Unknown output style {value!r} (expected one of: {choices})"
            ) from None


class UnitState(Enum):
    """Lifecycle of a single compile unit."""

    PENDING = "pending"
    VALIDATING = "validating"
    MAPPING = "mapping"
    REWRITING = "rewriting"
    EMITTED = "emitted"
    FAILED = "failed"


@dataclass(frozen=True)
class CompileUnit:
    """A stylesheet source file entering the pipeline.

    Attributes:
        path: Absolute path of the ``.scss``/``.sass`` source.
        cwd: Working directory the build was invoked from.
        base: Base directory used to place outputs relative to.
    """

    path: str
    cwd: str = field(default_factory=os.getcwd)
    base: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", os.path.abspath(self.path))
        object.__setattr__(self, "cwd", os.path.abspath(self.cwd))
        object.__setattr__(
            self, "base", os.path.abspath(self.base) if self.base else self.directory
        )

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)

    @property
    def stem(self) -> str:
        return Path(self.path).stem

    @property
    def css_name(self) -> str:
        return f"{self.stem}.css"

    @property
    def map_name(self) -> str:
        return f"{self.stem}.css.map"


@dataclass(frozen=True)
class OutputFile:
    """An in-memory output file, positioned like its source."""

    path: str
    base: str
    cwd: str
    contents: bytes

    @property
    def relative(self) -> str:
        """Path relative to ``base``, for writing under an output directory."""
        return os.path.relpath(self.path, self.base)

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")

    @classmethod
    def beside(cls, unit: CompileUnit, name: str, text: str) -> OutputFile:
        """Build an output file named *name* in the unit's source directory."""
        return cls(
            path=os.path.join(unit.directory, name),
            base=unit.base,
            cwd=unit.cwd,
            contents=text.encode("utf-8"),
        )
