"""Session controller: the live document and its persistence lifecycle.

A NovelSession owns exactly one open document at a time. Views call
``mutate`` with a primitive from ``models.document``; the session swaps in
the returned value and re-arms the autosave timer. Manual save, periodic
snapshots, restore, import and export all go through the same persist
primitive, which never raises for storage failures: it reports them via
the callback and keeps the in-memory document. Reads (``create``, ``load``)
have nothing to keep and raise StorageError to the caller instead.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

from config.exceptions import (
    DocumentNotFoundError,
    GenerationError,
    NoActiveDocumentError,
    SessionError,
    StorageError,
    ValidationError,
)
from config.settings import Settings
from models.document import new_novel
from models.enums import ImportStatus, PersistReason, SaveStatus
from models.novel import Novel, NovelVersion
from persistence.codec import decode, encode, export_filename
from persistence.storage import KEY_PREFIX, KeyValueStore, storage_key
from persistence.version_store import VersionStore
from tools.text_utils import slugify
from workflow.callbacks import LoggingCallback, SessionCallback
from workflow.scheduler import PersistenceScheduler
from workflow.timers import TimerHandle, TimerSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ExportedFile:
    """Bytes ready to hand to a download or write to disk."""
    filename: str
    data: bytes


@dataclass(frozen=True)
class ImportResult:
    """Outcome of an import attempt."""
    status: ImportStatus
    novel: Optional[Novel] = None
    error: Optional[ValidationError] = None

    @property
    def imported(self) -> bool:
        return self.status is ImportStatus.IMPORTED


class NovelSession:
    """Top-level coordinator between views, the document, and storage."""

    def __init__(
        self,
        storage: KeyValueStore,
        timers: TimerSource,
        settings: Optional[Settings] = None,
        callback: Optional[SessionCallback] = None,
        version_store: Optional[VersionStore] = None,
    ):
        self.settings = settings or Settings()
        self.storage = storage
        self.timers = timers
        self.callback = callback or LoggingCallback()
        self.versions = version_store or VersionStore(self.settings.version_history_capacity)
        self._novel: Optional[Novel] = None
        self._scheduler: Optional[PersistenceScheduler] = None
        self._save_status = SaveStatus.IDLE
        self._status_handle: Optional[TimerHandle] = None

    # ---- State ----

    @property
    def novel(self) -> Optional[Novel]:
        return self._novel

    @property
    def is_open(self) -> bool:
        return self._novel is not None

    @property
    def save_status(self) -> SaveStatus:
        return self._save_status

    @property
    def scheduler(self) -> Optional[PersistenceScheduler]:
        return self._scheduler

    def _require(self, operation: str) -> Novel:
        if self._novel is None:
            raise NoActiveDocumentError(operation)
        return self._novel

    def _now_ms(self) -> int:
        return int(self.timers.time() * 1000)

    # ---- Persist primitive ----

    def _persist(self, novel: Novel, reason: PersistReason) -> bool:
        key = storage_key(novel.id)
        try:
            self.storage.set(key, encode(novel))
        except StorageError as e:
            logger.warning("Failed to persist %s (%s): %s", key, reason.value, e)
            self.callback.on_warning(f"Could not save '{novel.title}'", e)
            return False
        logger.info("Saved %s (%s)", key, reason.value)
        self.callback.on_persisted(novel.id, reason)
        return True

    def _autosave(self) -> None:
        if self._novel is not None:
            self._persist(self._novel, PersistReason.AUTOSAVE)

    def _record_snapshot(self, current: Novel) -> Novel:
        history = self.versions.record(current, self._now_ms())
        self._novel = replace(current, version_history=history)
        self.callback.on_snapshot(current.id, history[0])
        return self._novel

    def _set_save_status(self, status: SaveStatus) -> None:
        if status is not self._save_status:
            self._save_status = status
            self.callback.on_save_status(status)

    def _cancel_status_timer(self) -> None:
        if self._status_handle is not None:
            self._status_handle.cancel()
            self._status_handle = None

    def _reset_save_status(self) -> None:
        self._status_handle = None
        self._set_save_status(SaveStatus.IDLE)

    # ---- Lifecycle ----

    def _open(self, novel: Novel) -> None:
        self.close()
        self._novel = novel
        self._scheduler = PersistenceScheduler(
            self.timers,
            on_autosave=self._autosave,
            on_snapshot=self.take_snapshot,
            debounce_delay=self.settings.autosave_debounce_seconds,
            snapshot_interval=self.settings.snapshot_interval_seconds,
        )
        self._scheduler.start()
        logger.info("Opened project '%s' (id=%s)", novel.title, novel.id)

    def close(self, flush: bool = True) -> None:
        """End the session, writing any pending autosave first."""
        if self._scheduler is not None:
            if flush:
                self._scheduler.flush()
            self._scheduler.stop()
            self._scheduler = None
        self._cancel_status_timer()
        self._save_status = SaveStatus.IDLE
        if self._novel is not None:
            logger.info("Closed project %s", self._novel.id)
        self._novel = None

    def _unique_id(self, base: str) -> str:
        candidate = base
        suffix = 2
        while self.storage.get(storage_key(candidate)) is not None:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def create(self, title: str) -> Novel:
        """Start a new project with one empty chapter and save it.

        Picking a free id reads storage. A read failure raises StorageError
        before anything is opened, as in ``load``. Only writes are reported
        through the callback, since those have a live document to keep.
        """
        title = title.strip()
        if not title:
            raise SessionError("Project title must not be empty")
        novel = new_novel(self._unique_id(slugify(title)), title)
        self._open(novel)
        self._persist(novel, PersistReason.CREATE)
        return novel

    def load(self, novel_id: str) -> Novel:
        """Open a saved project.

        Raises:
            DocumentNotFoundError: Nothing is stored under that id.
            ValidationError: The stored document is corrupt.
            StorageError: The read itself failed.

        On any of these the current session stays as it was.
        """
        text = self.storage.get(storage_key(novel_id))
        if text is None:
            raise DocumentNotFoundError(novel_id)
        novel = decode(
            text,
            fallback_id=novel_id,
            history_capacity=self.versions.capacity,
        )
        self._open(novel)
        return novel

    def list_projects(self) -> list[str]:
        return sorted(key[len(KEY_PREFIX):] for key in self.storage.keys(KEY_PREFIX))

    # ---- Editing ----

    def mutate(self, fn: Callable[..., Novel], *args: Any, **kwargs: Any) -> Novel:
        """Apply a document primitive to the live document.

        No-op primitives (same object returned) do not re-arm autosave.
        """
        current = self._require("mutate")
        updated = fn(current, *args, **kwargs)
        if updated is current:
            return current
        if updated.id != current.id:
            raise SessionError("A mutation cannot change the project id", {"id": current.id})
        self._novel = updated
        self._scheduler.notify_edit()
        return updated

    async def generate(
        self,
        produce: Callable[[Novel], Awaitable[T]],
        apply: Callable[[Novel, T], Novel],
    ) -> Optional[Novel]:
        """Run a generative request and merge its result into the document.

        ``produce`` receives the document as it is now; ``apply`` receives
        the document as it is when the result arrives, so edits made while
        waiting are kept. Returns None when the project was closed or
        switched in the meantime and the result was dropped.

        Raises:
            GenerationError: The request failed. The document is unchanged.
        """
        current = self._require("generate")
        try:
            result = await produce(current)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Generation failed: {e}") from e

        if self._novel is None or self._novel.id != current.id:
            logger.info("Dropping generated result for %s: project no longer open", current.id)
            return None
        return self.mutate(apply, result)

    # ---- Saving and versions ----

    def take_snapshot(self) -> bool:
        """Record a version of the live document and persist it."""
        current = self._require("take_snapshot")
        return self._persist(self._record_snapshot(current), PersistReason.SNAPSHOT)

    def save(self) -> bool:
        """Manual save: snapshot and persist now, independent of autosave.

        The status shows SAVED for ``save_status_display_seconds`` and then
        returns to IDLE. Returns whether the write succeeded.
        """
        current = self._require("save")
        self._cancel_status_timer()
        self._set_save_status(SaveStatus.SAVING)
        ok = self._persist(self._record_snapshot(current), PersistReason.MANUAL)
        if not ok:
            self._set_save_status(SaveStatus.IDLE)
            return False
        self._scheduler.cancel_debounce()
        self._set_save_status(SaveStatus.SAVED)
        self._status_handle = self.timers.call_later(
            self.settings.save_status_display_seconds, self._reset_save_status,
        )
        return True

    def history(self) -> list[NovelVersion]:
        """Versions of the live document, newest first."""
        return self.versions.list_chronological(self._require("history").version_history)

    def restore(self, version: NovelVersion | int) -> Novel:
        """Replace the live content with a snapshot and persist it.

        ``version`` may be a NovelVersion or the timestamp of one in the
        live history. The project id and the live history are kept.
        """
        current = self._require("restore")
        if not isinstance(version, NovelVersion):
            found = self.versions.find(current.version_history, version)
            if found is None:
                raise SessionError(f"No version with timestamp {version}", {"id": current.id})
            version = found
        restored = self.versions.restore(version, current)
        self._novel = restored
        self._scheduler.cancel_debounce()
        self._persist(restored, PersistReason.RESTORE)
        logger.info("Restored %s to version %d", current.id, version.timestamp)
        return restored

    revert = restore

    # ---- Import / export ----

    def export_document(self) -> ExportedFile:
        current = self._require("export")
        return ExportedFile(
            filename=export_filename(current.title, self.settings.export_extension),
            data=encode(current, indent=2).encode("utf-8"),
        )

    def export_to_file(self, directory: Optional[str | Path] = None) -> Path:
        """Write the export to ``directory`` (default: settings.export_dir).

        Raises:
            StorageError: The file could not be written.
        """
        exported = self.export_document()
        target_dir = Path(directory or self.settings.export_dir)
        path = target_dir / exported.filename
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(exported.data)
        except OSError as e:
            raise StorageError(f"Export failed: {e}", {"path": str(path)}) from e
        logger.info("Exported %s to %s", self._novel.id, path)
        return path

    def import_from_file(self, data: bytes | str, confirm: Callable[[Novel], bool]) -> ImportResult:
        """Decode an external document and, once confirmed, make it live.

        A document that fails validation is rejected and the live document
        is left exactly as it was. ``confirm`` is asked before replacing,
        since unsaved state of the current project would be lost.
        """
        try:
            text = data.decode("utf-8") if isinstance(data, bytes) else data
            imported = decode(
                text,
                fallback_id=self._novel.id if self._novel else None,
                history_capacity=self.versions.capacity,
            )
        except UnicodeDecodeError as e:
            error = ValidationError(f"File is not UTF-8 text: {e.reason}", field="$")
            return self._reject_import(error)
        except ValidationError as e:
            return self._reject_import(e)

        if not confirm(imported):
            logger.info("Import of '%s' declined", imported.title)
            return ImportResult(ImportStatus.DECLINED, novel=imported)

        self._open(imported)
        self._persist(imported, PersistReason.IMPORT)
        return ImportResult(ImportStatus.IMPORTED, novel=imported)

    def _reject_import(self, error: ValidationError) -> ImportResult:
        logger.warning("Import rejected: %s", error)
        self.callback.on_warning("Import rejected", error)
        return ImportResult(ImportStatus.REJECTED, error=error)
