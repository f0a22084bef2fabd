from __future__ import annotations

from typing import Dict, Optional

from sqlalchemy.orm import Session
from typing_extensions import Protocol

from .models import TextEntry


class TextStore(Protocol):
    """String key-value storage for free text such as reflections."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryTextStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class SqlTextStore:
    def __init__(self, session: Session):
        self.session = session

    def get(self, key: str) -> Optional[str]:
        record = self.session.query(TextEntry).filter(TextEntry.key == key).one_or_none()
        return record.value if record else None

    def set(self, key: str, value: str) -> None:
        record = self.session.query(TextEntry).filter(TextEntry.key == key).one_or_none()
        if record:
            record.value = value
        else:
            self.session.add(TextEntry(key=key, value=value))
        self.session.commit()
