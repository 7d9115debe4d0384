from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from sassinline.model.unit import OutputStyle


@dataclass(frozen=True)
class SassConfig:
    output_style: OutputStyle = OutputStyle.COMPRESSED
    banner_width: int = 0  # 0 disables the banner rules around diagnostics
    library_paths: tuple[str, ...] = ()
    root: str = field(default_factory=os.getcwd)  # asset search never climbs past this
    max_inline_bytes: int | None = None
    max_search_depth: int | None = None
    workers: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_style", OutputStyle.parse(self.output_style))
        paths = self.library_paths
        if isinstance(paths, (str, os.PathLike)):
            paths = (paths,)
        object.__setattr__(self, "library_paths", tuple(str(p) for p in paths))
        object.__setattr__(self, "root", os.path.abspath(self.root))
        if self.banner_width < 0:
            raise ValueError(f"banner_width must be >= 0, got {self.banner_width}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SassConfig:
        """Build a config from a plain mapping, ignoring unknown keys.

        camelCase keys (``outputStyle``, ``bannerWidth``) are accepted too.
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name in known and value is not None:
                kwargs[name] = value
        return cls(**kwargs)


def _snake_case(key: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
