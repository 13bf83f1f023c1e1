"""Events the session facade reports about state changes.

Every event name belongs to :class:`StateEvent` and carries a fixed set of
payload fields. Events are handed to in-process listeners (presentation
hooks, tests) and written to the ``aptidude.telemetry`` logger as one JSON
line each.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Any, Callable, Dict, FrozenSet, List, Union

from .errors import ContractViolationError

logger = logging.getLogger("aptidude.telemetry")


class StateEvent(str, Enum):
    AUTH_REJECTED = "auth_rejected"
    USER_SIGNED_UP = "user_signed_up"
    USER_LOGGED_IN = "user_logged_in"
    USER_LOGGED_OUT = "user_logged_out"
    PREFERENCE_UPDATED = "preference_updated"
    LEVEL_COMPLETED = "level_completed"
    XP_AWARDED = "xp_awarded"
    DATA_RESET = "data_reset"


EVENT_FIELDS: Dict[StateEvent, FrozenSet[str]] = {
    StateEvent.AUTH_REJECTED: frozenset({"mode", "reason"}),
    StateEvent.USER_SIGNED_UP: frozenset({"user_id", "username"}),
    StateEvent.USER_LOGGED_IN: frozenset({"user_id", "username"}),
    StateEvent.USER_LOGGED_OUT: frozenset({"username"}),
    StateEvent.PREFERENCE_UPDATED: frozenset({"name", "value"}),
    StateEvent.LEVEL_COMPLETED: frozenset({"topic_id", "level_id", "xp_earned"}),
    StateEvent.XP_AWARDED: frozenset({"amount", "total_xp"}),
    StateEvent.DATA_RESET: frozenset({"removed_keys"}),
}

Listener = Callable[["TelemetryEvent"], None]


@dataclass(frozen=True)
class TelemetryEvent:
    name: StateEvent
    payload: Dict[str, Any]

    def to_json(self) -> str:
        return json.dumps({"event": self.name.value, **self.payload}, sort_keys=True)


_listeners: List[Listener] = []
_lock = RLock()


def register_listener(listener: Listener) -> None:
    with _lock:
        _listeners.append(listener)


def clear_listeners() -> None:
    with _lock:
        _listeners.clear()


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def build_event(name: Union[StateEvent, str], /, **fields: Any) -> TelemetryEvent:
    """Check ``name`` and its fields against the event catalog.

    Raises :class:`ContractViolationError` for an unknown event or a payload
    whose field names differ from the catalog entry.
    """
    try:
        event_name = StateEvent(name)
    except ValueError as exc:
        raise ContractViolationError(f"Unknown state event {name!r}.") from exc
    expected = EVENT_FIELDS[event_name]
    if set(fields) != expected:
        raise ContractViolationError(
            f"Event {event_name.value} expects fields {sorted(expected)}, got {sorted(fields)}."
        )
    return TelemetryEvent(name=event_name, payload={key: _plain(value) for key, value in fields.items()})


def emit_event(name: Union[StateEvent, str], /, **fields: Any) -> TelemetryEvent:
    event = build_event(name, **fields)

    with _lock:
        listeners = list(_listeners)

    for listener in listeners:
        try:
            listener(event)
        except Exception:  # noqa: BLE001
            logger.exception("Telemetry listener failed for %s", event.name.value)

    logger.info("TELEMETRY %s", event.to_json())
    return event


__all__ = [
    "EVENT_FIELDS",
    "StateEvent",
    "TelemetryEvent",
    "build_event",
    "clear_listeners",
    "emit_event",
    "register_listener",
]
