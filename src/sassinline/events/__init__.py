"""Event system: bus and event types for the compile lifecycle."""

from sassinline.events.bus import EventBus
from sassinline.events.types import (
    AssetInlined,
    RunCompleted,
    UnitCompiled,
    UnitFailed,
    UnitStarted,
)

__all__ = [
    "EventBus",
    "AssetInlined",
    "RunCompleted",
    "UnitCompiled",
    "UnitFailed",
    "UnitStarted",
]
