"""Bounded version history: snapshots, ordering, eviction, and restore.

History is stored newest first. Recording prepends the new snapshot and
evicts from the tail once the capacity is exceeded.
"""

import logging
from typing import Optional, Sequence

from models.document import clone_snapshot, snapshot_of
from models.novel import Novel, NovelVersion

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50


def keep_newest(history: Sequence[NovelVersion], capacity: int) -> tuple[NovelVersion, ...]:
    """Return the ``capacity`` newest entries, keeping their stored order.

    Entries are ranked by timestamp; among equal timestamps the one stored
    earlier counts as newer, matching prepend order.
    """
    history = tuple(history)
    if len(history) <= capacity:
        return history
    ranked = sorted(range(len(history)), key=lambda i: (-history[i].timestamp, i))
    kept = sorted(ranked[:capacity])
    return tuple(history[i] for i in kept)


class VersionStore:
    """Maintains the bounded sequence of NovelVersion entries for a document."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity

    def record(self, novel: Novel, timestamp: int) -> tuple[NovelVersion, ...]:
        """Snapshot ``novel`` and return its history with the snapshot prepended.

        The snapshot is an independent structural copy without history.
        Recording the same timestamp twice yields two entries.
        """
        version = NovelVersion(timestamp=int(timestamp), novel=snapshot_of(novel))
        history = (version,) + tuple(novel.version_history)
        if len(history) > self.capacity:
            logger.debug(
                "History for %s over capacity (%d > %d), evicting oldest",
                novel.id, len(history), self.capacity,
            )
        return history[:self.capacity]

    def truncate(self, history: Sequence[NovelVersion]) -> tuple[NovelVersion, ...]:
        return keep_newest(history, self.capacity)

    @staticmethod
    def list_chronological(history: Sequence[NovelVersion]) -> list[NovelVersion]:
        """Return entries newest first, whatever order they are stored in."""
        return sorted(history, key=lambda v: v.timestamp, reverse=True)

    @staticmethod
    def find(history: Sequence[NovelVersion], timestamp: int) -> Optional[NovelVersion]:
        return next((v for v in history if v.timestamp == timestamp), None)

    @staticmethod
    def restore(version: NovelVersion, current: Novel) -> Novel:
        """Adopt the snapshot's content, keeping ``current``'s id and history."""
        content = clone_snapshot(version.novel)
        return Novel(
            id=current.id,
            title=content.title,
            outline=content.outline,
            characters=content.characters,
            chapters=content.chapters,
            version_history=current.version_history,
        )
