"""Workflow package — editing session, persistence scheduling, and timers."""

from workflow.timers import TimerSource, TimerHandle, AsyncioTimerSource, ManualTimerSource
from workflow.scheduler import PersistenceScheduler
from workflow.callbacks import SessionCallback, LoggingCallback, ConsoleCallback
from workflow.session import NovelSession, ExportedFile, ImportResult

__all__ = [
    "TimerSource",
    "TimerHandle",
    "AsyncioTimerSource",
    "ManualTimerSource",
    "PersistenceScheduler",
    "SessionCallback",
    "LoggingCallback",
    "ConsoleCallback",
    "NovelSession",
    "ExportedFile",
    "ImportResult",
]
