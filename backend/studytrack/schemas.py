from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

from typing_extensions import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def _serialize_datetime(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    else:
        value = value.astimezone(dt.timezone.utc)
    return value.isoformat()


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _as_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


class Task(BaseModel):
    """One learning activity of one day. Instances are read-only snapshots."""

    model_config = ConfigDict(frozen=True)
    id: str = Field(min_length=1)
    title: str = ""
    category: str = "general"
    completed: bool = Field(default=False, strict=True)
    duration_minutes: int = Field(default=0, ge=0)
    notes: str = ""
    video_data: Dict[str, str] = Field(default_factory=dict)


class FocusSession(BaseModel):
    model_config = ConfigDict(frozen=True)
    day: str
    task_id: str
    started_at: dt.datetime = Field(default_factory=_utcnow)
    planned_minutes: int = Field(default=25, ge=1)

    def elapsed_seconds(self, now: Optional[dt.datetime] = None) -> int:
        now = _as_utc(now or _utcnow())
        started = _as_utc(self.started_at)
        return max(int((now - started).total_seconds()), 0)

    def remaining_seconds(self, now: Optional[dt.datetime] = None) -> int:
        return max(self.planned_minutes * 60 - self.elapsed_seconds(now), 0)

    def matches(self, day: str, task_id: str) -> bool:
        return self.day == day and self.task_id == task_id

    @field_serializer("started_at", when_used="json")
    def _serialize_started_at(self, value: dt.datetime) -> str:
        return _serialize_datetime(value)


class ProgressSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)
    completed_count: int
    total_count: int
    percentage: int
    total_minutes: int
    total_time_label: str


class Notice(BaseModel):
    kind: Literal["not_found", "invalid_argument"]
    message: str


class DayView(BaseModel):
    day: str
    day_name: str
    tasks: List[Task]
    progress: ProgressSnapshot
    focus_session: Optional[FocusSession] = None
    dark_mode: bool = False
    notice: Optional[Notice] = None


class CompletedUpdateRequest(BaseModel):
    completed: bool


class DurationUpdateRequest(BaseModel):
    minutes: int


class NotesUpdateRequest(BaseModel):
    notes: str = ""


class VideoFieldUpdateRequest(BaseModel):
    field: str = Field(min_length=1)
    value: str = ""


class PreferencesUpdateRequest(BaseModel):
    dark_mode: bool


class PreferencesResponse(BaseModel):
    dark_mode: bool


class ReflectionUpdateRequest(BaseModel):
    text: str = ""


class ReflectionResponse(BaseModel):
    date: dt.date
    key: str
    text: str


class VocabularyEntry(BaseModel):
    term: str = Field(min_length=1)
    translation: str = ""
    example: str = ""
    tag: Optional[str] = None
