from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import InvalidArgument
from .utils import TODAY, WEEKDAY_KEYS, normalize_day_key

PlanData = Dict[str, List[Dict[str, Any]]]


def _video_task(task_id: str, title: str, minutes: int) -> Dict[str, Any]:
    return {
        "id": task_id,
        "title": title,
        "category": "video",
        "duration_minutes": minutes,
        "video_data": {"url": "", "title": ""},
    }


def _task(task_id: str, title: str, category: str, minutes: int) -> Dict[str, Any]:
    return {"id": task_id, "title": title, "category": category, "duration_minutes": minutes}


def _day_tasks(prefix: str) -> List[Dict[str, Any]]:
    return [
        _video_task(f"{prefix}-video", "Easy German Video schauen", 20),
        _task(f"{prefix}-vocab", "Vokabeln wiederholen (10 neue Wörter)", "vocabulary", 15),
        _task(f"{prefix}-grammar", "Grammatik üben", "grammar", 20),
        _task(f"{prefix}-speaking", "Laut vorlesen und nachsprechen", "speaking", 10),
    ]


def default_plan() -> PlanData:
    """German study week used when no plan file is configured."""
    plan: PlanData = {TODAY: _day_tasks("today")}
    for key in WEEKDAY_KEYS:
        plan[key] = _day_tasks(key)
    # lighter weekend
    plan["sat"] = plan["sat"][:2]
    plan["sun"] = [_task("sun-review", "Wochenrückblick und Reflexion", "review", 30)]
    return plan


def parse_plan(raw: Any) -> PlanData:
    if not isinstance(raw, dict):
        raise InvalidArgument("Plan must map day keys to task lists")
    plan: PlanData = {}
    for day, entries in raw.items():
        key = normalize_day_key(day)
        if key is None:
            raise InvalidArgument("Plan contains an empty day key")
        if isinstance(entries, dict):
            entries = entries.get("tasks", [])
        if not isinstance(entries, list):
            raise InvalidArgument(f"Tasks for day '{key}' must be a list")
        plan[key] = [dict(entry) if isinstance(entry, dict) else entry for entry in entries]
    return plan


def load_plan(path: Optional[Path]) -> PlanData:
    if path is None:
        return default_plan()
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise InvalidArgument(f"Plan file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidArgument(f"Plan file is not valid JSON: {exc.msg}") from exc
    return parse_plan(raw)
