"""Tests for the state event catalog and listener fan-out."""

from __future__ import annotations

import json
from typing import List

import pytest

from aptidude.errors import ContractViolationError
from aptidude.models import TargetExam
from aptidude.telemetry import EVENT_FIELDS, StateEvent, TelemetryEvent, build_event, emit_event, register_listener


def test_every_event_has_a_field_set() -> None:
    assert set(EVENT_FIELDS) == set(StateEvent)


def test_unknown_event_name_is_rejected(events: List[TelemetryEvent]) -> None:
    with pytest.raises(ContractViolationError):
        emit_event("user_deleted", username="jane")
    assert events == []


@pytest.mark.parametrize(
    "fields",
    [
        {"topic_id": "ratios", "level_id": "level-1"},
        {"topic_id": "ratios", "level_id": "level-1", "xp_earned": 5, "extra": True},
    ],
)
def test_payload_must_match_catalog(fields) -> None:
    with pytest.raises(ContractViolationError):
        build_event(StateEvent.LEVEL_COMPLETED, **fields)


def test_payload_values_are_made_plain() -> None:
    event = build_event("preference_updated", name="target-exam", value=TargetExam.GRE)
    assert event.name is StateEvent.PREFERENCE_UPDATED
    assert event.payload == {"name": "target-exam", "value": "GRE"}


def test_emit_logs_json_line(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("INFO", logger="aptidude.telemetry"):
        emit_event(StateEvent.DATA_RESET, removed_keys=3)
    line = caplog.records[-1].getMessage()
    assert line.startswith("TELEMETRY ")
    assert json.loads(line[len("TELEMETRY "):]) == {"event": "data_reset", "removed_keys": 3}


def test_failing_listener_does_not_block_others(
    events: List[TelemetryEvent], caplog: pytest.LogCaptureFixture
) -> None:
    def broken(event: TelemetryEvent) -> None:
        raise RuntimeError("listener down")

    register_listener(broken)
    seen: List[TelemetryEvent] = []
    register_listener(seen.append)

    emit_event(StateEvent.USER_LOGGED_OUT, username="jane")

    assert [event.name for event in events] == [StateEvent.USER_LOGGED_OUT]
    assert [event.name for event in seen] == [StateEvent.USER_LOGGED_OUT]
    assert "Telemetry listener failed" in caplog.text
