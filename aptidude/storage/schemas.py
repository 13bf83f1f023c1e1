"""Per-key schemas: how each stored string maps to a typed value and back."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import StorageCorruptionError

T = TypeVar("T")
E = TypeVar("E", bound=Enum)
M = TypeVar("M", bound=BaseModel)

TRUE_LITERAL = "true"
FALSE_LITERAL = "false"
_DECIMAL = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class RecordSchema(Generic[T]):
    """Binds a storage key to its default and its string codec.

    ``parse`` raises :class:`StorageCorruptionError` for anything it cannot
    turn into a valid domain value; the record store turns that into the
    default.
    """

    key: str
    default_factory: Callable[[], T]
    parse: Callable[[str], T]
    dump: Callable[[T], str]

    def default(self) -> T:
        return self.default_factory()


def boolean_schema(key: str, default: bool) -> RecordSchema[bool]:
    def parse(raw: str) -> bool:
        if raw == TRUE_LITERAL:
            return True
        if raw == FALSE_LITERAL:
            return False
        raise StorageCorruptionError(key, raw, "expected 'true' or 'false'")

    def dump(value: bool) -> str:
        return TRUE_LITERAL if value else FALSE_LITERAL

    return RecordSchema(key=key, default_factory=lambda: default, parse=parse, dump=dump)


def integer_schema(
    key: str,
    default: int,
    normalize: Optional[Callable[[int], int]] = None,
) -> RecordSchema[int]:
    def parse(raw: str) -> int:
        text = raw.strip()
        if _DECIMAL.fullmatch(text) is None:
            raise StorageCorruptionError(key, raw, "expected a decimal integer")
        value = int(text)
        return normalize(value) if normalize else value

    def dump(value: int) -> str:
        return str(int(value))

    return RecordSchema(key=key, default_factory=lambda: default, parse=parse, dump=dump)


def enum_schema(key: str, enum_type: Type[E], default: E) -> RecordSchema[E]:
    def parse(raw: str) -> E:
        try:
            return enum_type(raw)
        except ValueError as exc:
            raise StorageCorruptionError(key, raw, f"not a {enum_type.__name__} label") from exc

    def dump(value: E) -> str:
        return str(value.value)

    return RecordSchema(key=key, default_factory=lambda: default, parse=parse, dump=dump)


def model_schema(
    key: str,
    model_type: Type[M],
    default_factory: Callable[[], Optional[M]],
) -> RecordSchema[Optional[M]]:
    def parse(raw: str) -> Optional[M]:
        try:
            return model_type.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageCorruptionError(key, raw, f"invalid {model_type.__name__} payload") from exc

    def dump(value: Optional[M]) -> str:
        if value is None:
            raise ValueError(f"Cannot store an empty {model_type.__name__} under '{key}'.")
        return value.model_dump_json()

    return RecordSchema(key=key, default_factory=default_factory, parse=parse, dump=dump)


__all__ = [
    "FALSE_LITERAL",
    "RecordSchema",
    "TRUE_LITERAL",
    "boolean_schema",
    "enum_schema",
    "integer_schema",
    "model_schema",
]
