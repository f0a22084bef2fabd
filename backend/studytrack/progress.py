from __future__ import annotations

from typing import Iterable, Sequence

from .schemas import ProgressSnapshot, Task


def format_duration(minutes: int) -> str:
    """Render a minute total as "45min", "1h" or "1h 15min"."""
    minutes = max(int(minutes), 0)
    hours, rest = divmod(minutes, 60)
    if not hours:
        return f"{rest}min"
    if not rest:
        return f"{hours}h"
    return f"{hours}h {rest}min"


def _percentage(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    # half-up, matching Math.round for non-negative ratios
    return int(100 * completed / total + 0.5)


def aggregate(tasks: Sequence[Task]) -> ProgressSnapshot:
    completed = sum(1 for task in tasks if task.completed)
    total = len(tasks)
    # every task counts towards the time total, done or not
    total_minutes = sum(task.duration_minutes for task in tasks)
    return ProgressSnapshot(
        completed_count=completed,
        total_count=total,
        percentage=_percentage(completed, total),
        total_minutes=total_minutes,
        total_time_label=format_duration(total_minutes),
    )


def aggregate_many(sequences: Iterable[Sequence[Task]]) -> ProgressSnapshot:
    combined: list[Task] = []
    for tasks in sequences:
        combined.extend(tasks)
    return aggregate(combined)
