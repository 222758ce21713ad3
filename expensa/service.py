"""Ledger service: the single owner of the current snapshot.

All readers and writers go through a LedgerService instance. It applies commands
with the pure state machine, persists each changed snapshot through an injected
save callback, and runs the recurrence generator on demand or on a timer.
"""

import sqlite3
import threading
from collections.abc import Callable
from datetime import date

import structlog

from expensa.domain.commands import Command
from expensa.domain.ledger import apply_checked
from expensa.domain.models import Expense, LedgerState, default_state
from expensa.domain.recurrence import due_expenses

logger = structlog.get_logger(__name__)

SaveCallback = Callable[[LedgerState], None]

SECONDS_PER_DAY = 24 * 60 * 60


class LedgerService:
    """Holds the current snapshot and serialises every mutation.

    Older snapshots handed out by `state` are never modified, so callers may keep
    reading them while later commands are applied.
    """

    def __init__(
        self,
        state: LedgerState | None = None,
        save: SaveCallback | None = None,
        today: Callable[[], date] | None = None,
        catch_up: bool = False,
    ) -> None:
        """Create a service.

        Args:
            state: Initial snapshot. Defaults to the built-in default state.
            save: Called with every snapshot produced by a changing command.
            today: Clock returning the current calendar day. Defaults to date.today.
            catch_up: Backfill every missed recurrence period instead of one per run.
        """
        self._state = state if state is not None else default_state()
        self._save = save
        self._today = today or date.today
        self._catch_up = catch_up
        self._lock = threading.RLock()

    @property
    def state(self) -> LedgerState:
        """Current snapshot."""
        return self._state

    def today(self) -> date:
        """Current calendar day according to the service clock."""
        return self._today()

    def dispatch(self, command: Command) -> bool:
        """Apply a command to the current snapshot.

        Args:
            command: Mutation to apply.

        Returns:
            True if the snapshot changed, False if the command was a no-op or rejected.
        """
        with self._lock:
            new_state, changed = apply_checked(self._state, command)
            name = type(command).__name__

            if not changed:
                logger.info("command_ignored", command=name)
                return False

            self._state = new_state
            logger.debug("command_applied", command=name)
            self._persist(new_state)
            return True

    def _persist(self, state: LedgerState) -> None:
        if self._save is None:
            return
        try:
            self._save(state)
        except (sqlite3.Error, OSError):
            # The in-memory transition stands; the next save carries it
            logger.exception("save_failed")

    def generate_recurring(self) -> list[Expense]:
        """Materialise every due recurring expense.

        Safe to call at any time: occurrences already recorded are never added again.

        Returns:
            Expenses that were added.
        """
        with self._lock:
            today = self._today()
            generated: list[Expense] = []

            for command in due_expenses(self._state, today, self._catch_up):
                if self.dispatch(command):
                    generated.append(command.expense)

            if generated:
                logger.info("recurring_generated", count=len(generated), today=today.isoformat())
            return generated


class RecurrenceScheduler:
    """Runs a service's recurrence generator on a fixed interval.

    One timer is pending at a time; each run completes before the next is
    scheduled, so runs never overlap.
    """

    def __init__(self, service: LedgerService, interval_seconds: float = SECONDS_PER_DAY) -> None:
        self._service = service
        self._interval = interval_seconds
        self._timer: threading.Timer | None = None
        self._stopped = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._stopped.is_set()

    def start(self) -> None:
        """Run the generator once now, then every interval until stopped."""
        self._stopped.clear()
        self._run()

    def stop(self) -> None:
        """Stop scheduling further runs. A run in progress finishes normally."""
        self._stopped.set()
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _run(self) -> None:
        if self._stopped.is_set():
            return
        try:
            self._service.generate_recurring()
        except Exception:
            logger.exception("recurrence_run_failed")
        self._schedule()

    def _schedule(self) -> None:
        with self._lock:
            if self._stopped.is_set():
                return
            self._timer = threading.Timer(self._interval, self._run)
            self._timer.daemon = True
            self._timer.start()
