"""Persistence primitives: backends, per-key schemas and the record store."""

from .backends import DatabaseBackend, InMemoryBackend, JsonFileBackend, KeyValueBackend
from .record_store import RecordStore
from .schemas import RecordSchema, boolean_schema, enum_schema, integer_schema, model_schema

__all__ = [
    "DatabaseBackend",
    "InMemoryBackend",
    "JsonFileBackend",
    "KeyValueBackend",
    "RecordSchema",
    "RecordStore",
    "boolean_schema",
    "enum_schema",
    "integer_schema",
    "model_schema",
]
