from __future__ import annotations

import logging
from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from .errors import InvalidArgument, NotFoundError
from .schemas import Task

logger = logging.getLogger(__name__)


def _build_tasks(day: str, entries: Iterable[Any]) -> List[Task]:
    tasks: List[Task] = []
    seen: set[str] = set()
    for entry in entries:
        try:
            task = entry if isinstance(entry, Task) else Task.model_validate(entry)
        except ValidationError as exc:
            raise InvalidArgument(f"Invalid task in day '{day}': {exc.errors()[0]['msg']}") from exc
        if task.id in seen:
            raise InvalidArgument(f"Duplicate task id '{task.id}' in day '{day}'")
        seen.add(task.id)
        tasks.append(task)
    return tasks


class TaskStore:
    """Authoritative in-memory record of every day's tasks.

    Callers only ever receive copies; all changes go through the named
    setters, which validate first and then swap in an updated task, so a
    rejected call leaves the store untouched.
    """

    def __init__(self, plan: Optional[Mapping[str, Iterable[Any]]] = None):
        self._lock = RLock()
        self._days: Dict[str, List[Task]] = {}
        self._revision = 0
        for day, entries in (plan or {}).items():
            self._days[day] = _build_tasks(day, entries)

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def days(self) -> List[str]:
        with self._lock:
            return list(self._days)

    def has_day(self, day: str) -> bool:
        with self._lock:
            return day in self._days

    def get_snapshot(self, day: str) -> Tuple[Task, ...]:
        with self._lock:
            tasks = self._tasks_for(day)
            return tuple(task.model_copy(deep=True) for task in tasks)

    def get_task(self, day: str, task_id: str) -> Task:
        with self._lock:
            _, task = self._locate(day, task_id)
            return task.model_copy(deep=True)

    def set_completed(self, day: str, task_id: str, completed: bool) -> Task:
        return self._replace(day, task_id, completed=completed)

    def set_duration(self, day: str, task_id: str, minutes: int) -> Task:
        with self._lock:
            # unknown ids are reported before the value is judged
            self._locate(day, task_id)
            if isinstance(minutes, bool) or not isinstance(minutes, int):
                raise InvalidArgument("Duration must be a whole number of minutes")
            if minutes < 0:
                raise InvalidArgument("Duration cannot be negative")
            return self._replace(day, task_id, duration_minutes=minutes)

    def set_notes(self, day: str, task_id: str, notes: str) -> Task:
        return self._replace(day, task_id, notes=notes)

    def set_video_field(self, day: str, task_id: str, field: str, value: str) -> Task:
        with self._lock:
            _, task = self._locate(day, task_id)
            video_data = dict(task.video_data)
            video_data[field] = value
            return self._replace(day, task_id, video_data=video_data)

    def _tasks_for(self, day: str) -> List[Task]:
        tasks = self._days.get(day)
        if tasks is None:
            raise NotFoundError(f"Unknown day '{day}'")
        return tasks

    def _locate(self, day: str, task_id: str) -> Tuple[int, Task]:
        for index, task in enumerate(self._tasks_for(day)):
            if task.id == task_id:
                return index, task
        raise NotFoundError(f"Task '{task_id}' not found in day '{day}'")

    def _replace(self, day: str, task_id: str, **changes: Any) -> Task:
        with self._lock:
            index, task = self._locate(day, task_id)
            try:
                updated = Task.model_validate({**task.model_dump(), **changes})
            except ValidationError as exc:
                error = exc.errors()[0]
                location = ".".join(str(part) for part in error["loc"])
                raise InvalidArgument(f"Invalid value for {location}: {error['msg']}") from exc
            if updated == task:
                return updated
            self._days[day][index] = updated
            self._revision += 1
            logger.debug("Task %s/%s updated: %s", day, task_id, ", ".join(sorted(changes)))
            return updated.model_copy(deep=True)
