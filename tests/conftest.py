"""Fixtures shared by the state layer tests."""

from __future__ import annotations

from typing import List

import pytest

from aptidude.storage import InMemoryBackend, RecordStore
from aptidude.telemetry import TelemetryEvent, clear_listeners, register_listener


@pytest.fixture()
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture()
def records(backend: InMemoryBackend) -> RecordStore:
    return RecordStore(backend)


@pytest.fixture()
def events():
    captured: List[TelemetryEvent] = []
    clear_listeners()
    register_listener(captured.append)
    yield captured
    clear_listeners()
