"""Typed access to the flat key-value namespace."""

from __future__ import annotations

import logging
from typing import List, TypeVar

from ..errors import StorageCorruptionError
from .backends import KeyValueBackend
from .schemas import RecordSchema

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordStore:
    """Reads and writes schema-described values over a key-value backend.

    Reads are total: a missing key returns the schema default, and a value
    the schema cannot parse is logged and also replaced by the default. The
    store holds no business rules of its own.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    def get(self, schema: RecordSchema[T]) -> T:
        raw = self._backend.read(schema.key)
        if raw is None:
            return schema.default()
        try:
            return schema.parse(raw)
        except StorageCorruptionError as exc:
            logger.warning("Falling back to default for %s: %s", schema.key, exc.reason)
            return schema.default()

    def set(self, schema: RecordSchema[T], value: T) -> T:
        self._backend.write(schema.key, schema.dump(value))
        return value

    def remove(self, key: str) -> None:
        self._backend.delete(key)

    def keys(self, prefix: str = "") -> List[str]:
        return [key for key in self._backend.keys() if key.startswith(prefix)]

    def remove_all(self) -> int:
        """Delete every stored key, one at a time, and return how many were removed.

        Not atomic: a process killed part-way through leaves the remaining
        keys in place.
        """
        removed = 0
        for key in self._backend.keys():
            self._backend.delete(key)
            removed += 1
        logger.info("Cleared %d stored keys", removed)
        return removed


__all__ = ["RecordStore"]
