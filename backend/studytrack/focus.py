from __future__ import annotations

import datetime as dt
import logging
from threading import RLock
from typing import Callable, Optional

from .schemas import FocusSession
from .state import TaskStore

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class FocusTimer:
    """Owner of the single focus session shared by every day and task.

    The coordinator only records which task is being focused on and when
    that started; the countdown itself is driven by whoever owns the tick.
    """

    def __init__(
        self,
        store: TaskStore,
        planned_minutes: int = 25,
        clock: Callable[[], dt.datetime] = _utcnow,
    ):
        self._lock = RLock()
        self._store = store
        self._planned_minutes = max(1, int(planned_minutes))
        self._clock = clock
        self._session: Optional[FocusSession] = None

    @property
    def current(self) -> Optional[FocusSession]:
        with self._lock:
            return self._session

    @property
    def state(self) -> str:
        with self._lock:
            return RUNNING if self._session is not None else IDLE

    @property
    def is_running(self) -> bool:
        return self.state == RUNNING

    def start(self, day: str, task_id: str) -> FocusSession:
        with self._lock:
            # raises NotFoundError before anything changes
            self._store.get_task(day, task_id)
            previous = self._session
            if previous is not None and previous.matches(day, task_id):
                return previous
            if previous is not None:
                logger.warning(
                    "Focus session %s/%s superseded by %s/%s after %ss",
                    previous.day,
                    previous.task_id,
                    day,
                    task_id,
                    previous.elapsed_seconds(self._clock()),
                )
            self._session = FocusSession(
                day=day,
                task_id=task_id,
                started_at=self._clock(),
                planned_minutes=self._planned_minutes,
            )
            logger.info("Focus session started for %s/%s", day, task_id)
            return self._session

    def stop(self) -> Optional[FocusSession]:
        with self._lock:
            ended = self._session
            if ended is None:
                return None
            self._session = None
            logger.info("Focus session for %s/%s stopped", ended.day, ended.task_id)
            return ended

    def remaining_seconds(self) -> Optional[int]:
        with self._lock:
            if self._session is None:
                return None
            return self._session.remaining_seconds(self._clock())
