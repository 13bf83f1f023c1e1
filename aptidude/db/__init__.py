"""Database utilities for the SQL-backed record store."""

from .models import StoredRecordModel
from .session import build_engine, build_session_factory, session_scope

__all__ = [
    "StoredRecordModel",
    "build_engine",
    "build_session_factory",
    "session_scope",
]
