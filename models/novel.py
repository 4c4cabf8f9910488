"""Novel document and version snapshot models."""

from dataclasses import dataclass

from models.chapter import Chapter, PlotPoint
from models.character import Character


@dataclass(frozen=True)
class NovelSnapshot:
    """A novel's content without its version history.

    Snapshots are what a NovelVersion stores, so history never nests.
    """
    id: str
    title: str = ""
    outline: tuple[PlotPoint, ...] = ()
    characters: tuple[Character, ...] = ()
    chapters: tuple[Chapter, ...] = ()


@dataclass(frozen=True)
class NovelVersion:
    """A timestamped snapshot kept in a novel's version history."""
    timestamp: int  # Milliseconds since the epoch
    novel: NovelSnapshot


@dataclass(frozen=True)
class Novel:
    """Represents the whole writing project being edited."""
    id: str
    title: str = ""
    outline: tuple[PlotPoint, ...] = ()
    characters: tuple[Character, ...] = ()
    chapters: tuple[Chapter, ...] = ()
    version_history: tuple[NovelVersion, ...] = ()
