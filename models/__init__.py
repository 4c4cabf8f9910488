"""Models package — document dataclasses, enums, and mutation primitives."""

from models.novel import Novel, NovelSnapshot, NovelVersion
from models.chapter import Chapter, PlotPoint
from models.character import Character
from models.enums import (
    SaveStatus,
    MoveDirection,
    TimerState,
    ImportStatus,
    PersistReason,
)

__all__ = [
    "Novel",
    "NovelSnapshot",
    "NovelVersion",
    "Chapter",
    "PlotPoint",
    "Character",
    "SaveStatus",
    "MoveDirection",
    "TimerState",
    "ImportStatus",
    "PersistReason",
]
