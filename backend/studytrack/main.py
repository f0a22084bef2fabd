from __future__ import annotations

import datetime as dt
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .database import engine, get_db
from .schemas import (
    CompletedUpdateRequest,
    DayView,
    DurationUpdateRequest,
    FocusSession,
    NotesUpdateRequest,
    PreferencesResponse,
    PreferencesUpdateRequest,
    ProgressSnapshot,
    ReflectionResponse,
    ReflectionUpdateRequest,
    VideoFieldUpdateRequest,
    VocabularyEntry,
)
from .services import (
    DayViewController,
    add_vocabulary,
    build_controller,
    get_reflection,
    list_vocabulary,
    reflection_key,
    save_reflection,
)
from .text_store import SqlTextStore
from .utils import TODAY

NOTICE_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "invalid_argument": status.HTTP_400_BAD_REQUEST,
}


models.Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name)
app.state.controller = build_controller(settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_controller(request: Request) -> DayViewController:
    return request.app.state.controller


def _view_response(view: DayView) -> Response:
    code = NOTICE_STATUS[view.notice.kind] if view.notice else status.HTTP_200_OK
    return JSONResponse(view.model_dump(mode="json"), status_code=code)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/days", response_model=List[str])
def list_days(controller: DayViewController = Depends(get_controller)) -> List[str]:
    return controller.days()


@app.get("/days/{day}", response_model=DayView)
def day_view(day: str, controller: DayViewController = Depends(get_controller)) -> Response:
    return _view_response(controller.view(day))


@app.put("/days/{day}/tasks/{task_id}/completed", response_model=DayView)
def task_completed(
    day: str,
    task_id: str,
    payload: CompletedUpdateRequest,
    controller: DayViewController = Depends(get_controller),
) -> Response:
    return _view_response(controller.complete_task(day, task_id, payload.completed))


@app.put("/days/{day}/tasks/{task_id}/duration", response_model=DayView)
def task_duration(
    day: str,
    task_id: str,
    payload: DurationUpdateRequest,
    controller: DayViewController = Depends(get_controller),
) -> Response:
    return _view_response(controller.change_duration(day, task_id, payload.minutes))


@app.put("/days/{day}/tasks/{task_id}/notes", response_model=DayView)
def task_notes(
    day: str,
    task_id: str,
    payload: NotesUpdateRequest,
    controller: DayViewController = Depends(get_controller),
) -> Response:
    return _view_response(controller.change_notes(day, task_id, payload.notes))


@app.put("/days/{day}/tasks/{task_id}/video", response_model=DayView)
def task_video_field(
    day: str,
    task_id: str,
    payload: VideoFieldUpdateRequest,
    controller: DayViewController = Depends(get_controller),
) -> Response:
    return _view_response(controller.change_video_field(day, task_id, payload.field, payload.value))


@app.post("/days/{day}/tasks/{task_id}/focus", response_model=DayView)
def focus_start(day: str, task_id: str, controller: DayViewController = Depends(get_controller)) -> Response:
    return _view_response(controller.start_timer(day, task_id))


@app.delete("/focus", response_model=DayView)
def focus_stop(day: str = TODAY, controller: DayViewController = Depends(get_controller)) -> Response:
    return _view_response(controller.stop_timer(day))


@app.get("/focus", response_model=Optional[FocusSession])
def focus_current(controller: DayViewController = Depends(get_controller)) -> Optional[FocusSession]:
    return controller.focus_session()


@app.get("/progress/week", response_model=ProgressSnapshot)
def week_progress(controller: DayViewController = Depends(get_controller)) -> ProgressSnapshot:
    return controller.week_progress()


@app.put("/preferences", response_model=PreferencesResponse)
def update_preferences(
    payload: PreferencesUpdateRequest,
    controller: DayViewController = Depends(get_controller),
) -> PreferencesResponse:
    return PreferencesResponse(dark_mode=controller.set_dark_mode(payload.dark_mode))


@app.get("/reflections/{day}", response_model=ReflectionResponse)
def reflection_read(day: dt.date, db: Session = Depends(get_db)) -> ReflectionResponse:
    text = get_reflection(SqlTextStore(db), day)
    return ReflectionResponse(date=day, key=reflection_key(day), text=text)


@app.put("/reflections/{day}", response_model=ReflectionResponse)
def reflection_write(
    day: dt.date,
    payload: ReflectionUpdateRequest,
    db: Session = Depends(get_db),
) -> ReflectionResponse:
    text = save_reflection(SqlTextStore(db), day, payload.text)
    return ReflectionResponse(date=day, key=reflection_key(day), text=text)


@app.get("/vocabulary/{day}", response_model=List[VocabularyEntry])
def vocabulary_read(day: dt.date, db: Session = Depends(get_db)) -> List[VocabularyEntry]:
    return list_vocabulary(SqlTextStore(db), day)


@app.post("/vocabulary/{day}", response_model=List[VocabularyEntry], status_code=status.HTTP_201_CREATED)
def vocabulary_add(day: dt.date, payload: VocabularyEntry, db: Session = Depends(get_db)) -> List[VocabularyEntry]:
    return add_vocabulary(SqlTextStore(db), day, payload)
