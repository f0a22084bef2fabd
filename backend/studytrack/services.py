from __future__ import annotations

import datetime as dt
import logging
from threading import RLock
from typing import Any, Callable, List, Optional

from pydantic import TypeAdapter, ValidationError

from .config import Settings
from .errors import InvalidArgument, NotFoundError
from .focus import FocusTimer
from .plan import load_plan
from .progress import aggregate, aggregate_many
from .schemas import DayView, FocusSession, Notice, ProgressSnapshot, Task, VocabularyEntry
from .state import TaskStore
from .text_store import TextStore
from .utils import TODAY, day_display_name, local_today

logger = logging.getLogger(__name__)

REFLECTION_PREFIX = "reflection_"
VOCABULARY_PREFIX = "vocabulary_"

_RAW_LIST = TypeAdapter(List[Any])
_ENTRY_LIST = TypeAdapter(List[VocabularyEntry])


class DayViewController:
    """Turns user intents into store or timer calls and returns the fresh view.

    Every intent runs under one lock and always recomputes progress from
    the store. Rejected intents come back as a view with a notice attached
    instead of an exception.
    """

    def __init__(
        self,
        store: TaskStore,
        timer: FocusTimer,
        dark_mode: bool = False,
        today: Optional[Callable[[], dt.date]] = None,
    ):
        self._lock = RLock()
        self.store = store
        self.timer = timer
        self._dark_mode = dark_mode
        self._today = today or dt.date.today

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    def days(self) -> List[str]:
        return self.store.days()

    def view(self, day: str) -> DayView:
        return self._dispatch(day, lambda: None)

    def complete_task(self, day: str, task_id: str, completed: bool = True) -> DayView:
        return self._dispatch(day, lambda: self.store.set_completed(day, task_id, completed))

    def change_duration(self, day: str, task_id: str, minutes: int) -> DayView:
        return self._dispatch(day, lambda: self.store.set_duration(day, task_id, minutes))

    def change_notes(self, day: str, task_id: str, notes: str) -> DayView:
        return self._dispatch(day, lambda: self.store.set_notes(day, task_id, notes))

    def change_video_field(self, day: str, task_id: str, field: str, value: str) -> DayView:
        return self._dispatch(day, lambda: self.store.set_video_field(day, task_id, field, value))

    def start_timer(self, day: str, task_id: str) -> DayView:
        return self._dispatch(day, lambda: self.timer.start(day, task_id))

    def stop_timer(self, day: str = TODAY) -> DayView:
        def stop() -> None:
            if not self.store.has_day(day):
                raise NotFoundError(f"Unknown day '{day}'")
            self.timer.stop()

        return self._dispatch(day, stop)

    def set_dark_mode(self, enabled: bool) -> bool:
        with self._lock:
            self._dark_mode = bool(enabled)
            return self._dark_mode

    def focus_session(self) -> Optional[FocusSession]:
        return self.timer.current

    def week_progress(self) -> ProgressSnapshot:
        with self._lock:
            return aggregate_many(self.store.get_snapshot(day) for day in self.store.days())

    def _dispatch(self, day: str, operation: Callable[[], Any]) -> DayView:
        with self._lock:
            notice: Optional[Notice] = None
            try:
                operation()
            except (NotFoundError, InvalidArgument) as exc:
                logger.info("Intent on day '%s' rejected: %s", day, exc.message)
                notice = Notice(kind=exc.kind, message=exc.message)
            return self._build_view(day, notice)

    def _build_view(self, day: str, notice: Optional[Notice]) -> DayView:
        tasks: List[Task] = []
        if self.store.has_day(day):
            tasks = list(self.store.get_snapshot(day))
        elif notice is None:
            notice = Notice(kind="not_found", message=f"Unknown day '{day}'")
        return DayView(
            day=day,
            day_name=day_display_name(day, self._today() if day == TODAY else None),
            tasks=tasks,
            progress=aggregate(tasks),
            focus_session=self.timer.current,
            dark_mode=self._dark_mode,
            notice=notice,
        )


def build_controller(config: Settings) -> DayViewController:
    store = TaskStore(load_plan(config.plan_path))
    timer = FocusTimer(store, planned_minutes=config.focus_minutes)
    return DayViewController(
        store,
        timer,
        dark_mode=config.dark_mode,
        today=lambda: local_today(config.timezone),
    )


def reflection_key(day: dt.date) -> str:
    return f"{REFLECTION_PREFIX}{day.isoformat()}"


def get_reflection(store: TextStore, day: dt.date) -> str:
    return store.get(reflection_key(day)) or ""


def save_reflection(store: TextStore, day: dt.date, text: str) -> str:
    store.set(reflection_key(day), text or "")
    return text or ""


def vocabulary_key(day: dt.date) -> str:
    return f"{VOCABULARY_PREFIX}{day.isoformat()}"


def list_vocabulary(store: TextStore, day: dt.date) -> List[VocabularyEntry]:
    raw = store.get(vocabulary_key(day))
    if not raw:
        return []
    try:
        decoded = _RAW_LIST.validate_json(raw)
    except ValidationError:
        logger.warning("Vocabulary for %s is not a JSON list, ignoring it", day.isoformat())
        return []
    entries: List[VocabularyEntry] = []
    for index, item in enumerate(decoded):
        try:
            entries.append(VocabularyEntry.model_validate(item))
        except ValidationError:
            logger.warning("Skipping unreadable vocabulary entry %d for %s", index, day.isoformat())
    return entries


def add_vocabulary(store: TextStore, day: dt.date, entry: VocabularyEntry) -> List[VocabularyEntry]:
    entries = list_vocabulary(store, day)
    entries.append(entry)
    store.set(vocabulary_key(day), _ENTRY_LIST.dump_json(entries).decode("utf-8"))
    return entries
