"""Session event callbacks for monitoring and user feedback."""

import logging
from typing import Optional, Protocol, runtime_checkable

from rich.markup import escape

from models.enums import PersistReason, SaveStatus
from models.novel import NovelVersion

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionCallback(Protocol):
    """Protocol for session event callbacks.

    Views implement this to show save indicators and non-fatal warnings.
    """

    def on_persisted(self, novel_id: str, reason: PersistReason) -> None:
        """Called after the document was written to durable storage."""
        ...

    def on_snapshot(self, novel_id: str, version: NovelVersion) -> None:
        """Called after a version snapshot was recorded."""
        ...

    def on_save_status(self, status: SaveStatus) -> None:
        """Called when the manual save indicator changes."""
        ...

    def on_warning(self, message: str, error: Optional[Exception] = None) -> None:
        """Called for recoverable problems (failed write, rejected import)."""
        ...


class LoggingCallback:
    """Lightweight callback that logs session events to the standard logger."""

    def on_persisted(self, novel_id: str, reason: PersistReason) -> None:
        logger.debug("Persisted %s (%s)", novel_id, reason.value)

    def on_snapshot(self, novel_id: str, version: NovelVersion) -> None:
        logger.info("Snapshot of %s recorded at %d", novel_id, version.timestamp)

    def on_save_status(self, status: SaveStatus) -> None:
        logger.debug("Save status: %s", status.value)

    def on_warning(self, message: str, error: Optional[Exception] = None) -> None:
        if error is not None:
            logger.warning("%s: %s", message, error)
        else:
            logger.warning("%s", message)


class ConsoleCallback(LoggingCallback):
    """Logs like LoggingCallback and also prints warnings to a Rich console."""

    def __init__(self, console=None):
        if console is None:
            from cli.theme import get_console
            console = get_console()
        self._console = console

    def on_snapshot(self, novel_id: str, version: NovelVersion) -> None:
        super().on_snapshot(novel_id, version)
        self._console.print(f"[muted]Snapshot recorded ({len(version.novel.chapters)} chapters)[/]")

    def on_warning(self, message: str, error: Optional[Exception] = None) -> None:
        super().on_warning(message, error)
        detail = f": {error}" if error is not None else ""
        self._console.print(f"[warning]{escape(message + detail)}[/]")
