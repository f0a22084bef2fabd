from __future__ import annotations

import datetime as dt
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from studytrack import models
from studytrack.database import get_db
from studytrack.focus import FocusTimer
from studytrack.main import app
from studytrack.services import DayViewController
from studytrack.state import TaskStore

FIXED_START = dt.datetime(2024, 5, 6, 8, 0, tzinfo=dt.timezone.utc)


class FakeClock:
    def __init__(self, start: dt.datetime = FIXED_START):
        self.now = start

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += dt.timedelta(seconds=seconds)


def _plan() -> Dict[str, List[Dict[str, Any]]]:
    return {
        "today": [
            {"id": "video", "title": "Easy German", "category": "video", "completed": True, "duration_minutes": 10,
             "video_data": {"url": "https://example.com/watch"}},
            {"id": "vocab", "title": "Vokabeln", "category": "vocabulary", "completed": True, "duration_minutes": 20},
            {"id": "grammar", "title": "Grammatik", "category": "grammar", "duration_minutes": 30},
        ],
        "mon": [
            {"id": "t1", "title": "Lesen", "duration_minutes": 15},
            {"id": "t2", "title": "Hören", "duration_minutes": 25},
        ],
        "tue": [
            {"id": "t9", "title": "Schreiben", "duration_minutes": 40},
        ],
        "sun": [],
    }


@pytest.fixture()
def plan() -> Dict[str, List[Dict[str, Any]]]:
    return _plan()


@pytest.fixture()
def store(plan) -> TaskStore:
    return TaskStore(plan)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def timer(store: TaskStore, clock: FakeClock) -> FocusTimer:
    return FocusTimer(store, planned_minutes=25, clock=clock)


@pytest.fixture()
def controller(store: TaskStore, timer: FocusTimer) -> DayViewController:
    return DayViewController(store, timer, today=lambda: dt.date(2024, 5, 6))


@pytest.fixture(scope="session")
def temp_db_path() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "test.db"
        yield path


@pytest.fixture(scope="session")
def engine(temp_db_path: Path):
    url = f"sqlite:///{temp_db_path}"
    engine = create_engine(url, connect_args={"check_same_thread": False}, future=True)
    models.Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def session(engine) -> Generator[Session, None, None]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionTesting = sessionmaker(bind=connection, autoflush=False, autocommit=False, future=True)
    session = SessionTesting()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture(scope="function")
def client(session: Session, controller: DayViewController) -> Generator[TestClient, None, None]:
    def override_get_db():
        try:
            yield session
        finally:
            session.close()

    previous = app.state.controller
    app.state.controller = controller
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.controller = previous
