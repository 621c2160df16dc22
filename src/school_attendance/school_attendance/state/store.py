from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from ..attendance.repository import AttendanceRepository
from ..classes.repository import ClassRepository
from ..holidays.repository import HolidayRepository
from ..students.repository import StudentRepository
from .app_state import Action, AppState, Loaded, reduce

logger = logging.getLogger(__name__)


class StateStore:
    """Holds the current AppState and swaps it wholesale on each action."""

    def __init__(self, initial: Optional[AppState] = None):
        self._state = initial or AppState()
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._writer: Optional[int] = None

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        with self._lock:
            self._state = reduce(self._state, action)
            return self._state

    @contextmanager
    def transaction(self) -> Iterator[AppState]:
        """Run one read, store write and dispatch sequence at a time.

        Yields the snapshot to build on. Entering again from the thread that
        already holds it is a programming error and raises instead of blocking.
        """
        me = threading.get_ident()
        if self._writer == me:
            raise RuntimeError("State transaction already open in this thread")
        with self._write_lock:
            self._writer = me
            try:
                yield self._state
            finally:
                self._writer = None

    def load(
        self,
        *,
        students: StudentRepository,
        classes: ClassRepository,
        attendance: AttendanceRepository,
        holidays: HolidayRepository,
    ) -> AppState:
        """Initial fetch of every collection. Any store failure propagates."""
        state = self.dispatch(
            Loaded(
                students=students.list_all(),
                classes=classes.list_all(),
                records=attendance.list_all(),
                holidays=holidays.list_all(),
            )
        )
        logger.info(
            "State loaded: %d students, %d classes, %d records, %d holidays",
            len(state.students),
            len(state.classes),
            len(state.records),
            len(state.holidays),
        )
        return state
