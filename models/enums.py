"""Enumerations for document editing and persistence status tracking."""

from enum import Enum


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"


class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class TimerState(str, Enum):
    IDLE = "idle"
    PENDING_DEBOUNCE = "pending_debounce"
    PENDING_PERIODIC = "pending_periodic"


class ImportStatus(str, Enum):
    IMPORTED = "imported"
    DECLINED = "declined"
    REJECTED = "rejected"


class PersistReason(str, Enum):
    CREATE = "create"
    AUTOSAVE = "autosave"
    MANUAL = "manual"
    SNAPSHOT = "snapshot"
    RESTORE = "restore"
    IMPORT = "import"
