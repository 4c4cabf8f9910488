"""Persistence scheduler: debounced autosave and periodic snapshots.

Two independent timers run per open document:

    debounce:  Idle -> PendingDebounce -> Idle   (re-armed on every edit)
    periodic:  Idle -> PendingPeriodic -> Idle   (re-armed after every fire)

The scheduler decides *when*; the callbacks it is given decide *what* and
read the live document at fire time.
"""

import logging
from typing import Callable, Optional

from models.enums import TimerState
from workflow.timers import TimerHandle, TimerSource

logger = logging.getLogger(__name__)


class PersistenceScheduler:
    """Owns the debounce and periodic timers of one editing session."""

    def __init__(
        self,
        timers: TimerSource,
        on_autosave: Callable[[], None],
        on_snapshot: Callable[[], None],
        debounce_delay: float = 2.0,
        snapshot_interval: float = 300.0,
    ):
        self.timers = timers
        self.debounce_delay = debounce_delay
        self.snapshot_interval = snapshot_interval
        self._on_autosave = on_autosave
        self._on_snapshot = on_snapshot
        self._debounce_handle: Optional[TimerHandle] = None
        self._periodic_handle: Optional[TimerHandle] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def debounce_state(self) -> TimerState:
        return TimerState.PENDING_DEBOUNCE if self._debounce_handle else TimerState.IDLE

    @property
    def periodic_state(self) -> TimerState:
        return TimerState.PENDING_PERIODIC if self._periodic_handle else TimerState.IDLE

    def start(self) -> None:
        """Begin periodic snapshots. Safe to call twice."""
        if self._running:
            return
        self._running = True
        self._arm_periodic()
        logger.debug(
            "Scheduler started: debounce=%.1fs, snapshot every %.1fs",
            self.debounce_delay, self.snapshot_interval,
        )

    def notify_edit(self) -> None:
        """Restart the autosave delay after an edit."""
        if not self._running:
            return
        self.cancel_debounce()
        self._debounce_handle = self.timers.call_later(self.debounce_delay, self._fire_debounce)

    def cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def flush(self) -> bool:
        """Run a pending autosave now. Returns False if none was pending."""
        if self._debounce_handle is None:
            return False
        self.cancel_debounce()
        self._on_autosave()
        return True

    def stop(self) -> None:
        """Cancel both timers. Later edits are ignored."""
        self._running = False
        self.cancel_debounce()
        if self._periodic_handle is not None:
            self._periodic_handle.cancel()
            self._periodic_handle = None
        logger.debug("Scheduler stopped")

    def _fire_debounce(self) -> None:
        self._debounce_handle = None
        self._on_autosave()

    def _arm_periodic(self) -> None:
        self._periodic_handle = self.timers.call_later(self.snapshot_interval, self._fire_periodic)

    def _fire_periodic(self) -> None:
        self._periodic_handle = None
        try:
            self._on_snapshot()
        finally:
            if self._running:
                self._arm_periodic()
