"""Host key-value backends the record store can sit on."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from ..db.models import StoredRecordModel
from ..db.session import session_scope

logger = logging.getLogger(__name__)


class KeyValueBackend(Protocol):
    """Flat string-to-string storage that survives process restarts."""

    def read(self, key: str) -> Optional[str]:  # pragma: no cover - protocol definition
        ...

    def write(self, key: str, value: str) -> None:  # pragma: no cover - protocol definition
        ...

    def delete(self, key: str) -> None:  # pragma: no cover - protocol definition
        ...

    def keys(self) -> List[str]:  # pragma: no cover - protocol definition
        ...


class InMemoryBackend:
    """Process-local backend used by tests and the ``memory`` mode."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._entries: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def write(self, key: str, value: str) -> None:
        self._entries[key] = value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._entries)


class JsonFileBackend:
    """Keeps every key in one JSON object on disk, rewritten on each change."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()

    def _load_unlocked(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except (OSError, json.JSONDecodeError):
            logger.exception("Failed to read local store %s; starting from an empty store", self._path)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring local store %s with unexpected top-level type %s", self._path, type(raw).__name__)
            return {}
        entries: Dict[str, str] = {}
        for key, value in raw.items():
            if isinstance(value, str):
                entries[str(key)] = value
            else:
                logger.warning("Dropping non-string value stored under %s", key)
        return entries

    def _write_unlocked(self, entries: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump(entries, handle, indent=2)

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load_unlocked().get(key)

    def write(self, key: str, value: str) -> None:
        with self._lock:
            entries = self._load_unlocked()
            entries[key] = value
            self._write_unlocked(entries)

    def delete(self, key: str) -> None:
        with self._lock:
            entries = self._load_unlocked()
            if entries.pop(key, None) is not None:
                self._write_unlocked(entries)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._load_unlocked())


class DatabaseBackend:
    """Stores each key as one row of the ``stored_records`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def read(self, key: str) -> Optional[str]:
        with session_scope(self._session_factory, commit=False) as session:
            stmt = select(StoredRecordModel.value).where(StoredRecordModel.key == key)
            return session.execute(stmt).scalar_one_or_none()

    def write(self, key: str, value: str) -> None:
        with session_scope(self._session_factory) as session:
            stmt = select(StoredRecordModel).where(StoredRecordModel.key == key)
            model = session.execute(stmt).scalar_one_or_none()
            if model is None:
                session.add(StoredRecordModel(key=key, value=value))
            else:
                model.value = value

    def delete(self, key: str) -> None:
        with session_scope(self._session_factory) as session:
            session.execute(delete(StoredRecordModel).where(StoredRecordModel.key == key))

    def keys(self) -> List[str]:
        with session_scope(self._session_factory, commit=False) as session:
            stmt = select(StoredRecordModel.key).order_by(StoredRecordModel.id.asc())
            return list(session.execute(stmt).scalars().all())


__all__ = [
    "DatabaseBackend",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
]
