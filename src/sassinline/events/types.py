"""Event types emitted while compiling a batch of stylesheets."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UnitStarted:
    path: str


@dataclass(frozen=True)
class UnitCompiled:
    path: str
    outputs: tuple[str, ...]


@dataclass(frozen=True)
class UnitFailed:
    path: str
    state: str  # the state the unit failed in: "validating", "mapping" or "rewriting"
    diagnostic: str


@dataclass(frozen=True)
class AssetInlined:
    reference: str
    directory: str


@dataclass(frozen=True)
class RunCompleted:
    compiled: int
    failed: int
