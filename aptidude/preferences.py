"""Preference settings, one storage key per field."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Union

from .errors import ContractViolationError
from .models import (
    DAILY_GOAL_STEP,
    DEFAULT_DAILY_GOAL_XP,
    MAX_DAILY_GOAL_XP,
    MIN_DAILY_GOAL_XP,
    PreferenceName,
    Preferences,
    TargetExam,
)
from .storage import RecordSchema, RecordStore, boolean_schema, enum_schema, integer_schema

logger = logging.getLogger(__name__)


def clamp_daily_goal(value: int) -> int:
    """Clamp into [5, 100] and snap to the nearest multiple of 5."""
    bounded = min(MAX_DAILY_GOAL_XP, max(MIN_DAILY_GOAL_XP, value))
    snapped = DAILY_GOAL_STEP * round(bounded / DAILY_GOAL_STEP)
    return min(MAX_DAILY_GOAL_XP, max(MIN_DAILY_GOAL_XP, snapped))


NOTIFICATIONS_ENABLED = boolean_schema(PreferenceName.NOTIFICATIONS_ENABLED.value, True)
SOUND_ENABLED = boolean_schema(PreferenceName.SOUND_ENABLED.value, True)
OFFLINE_MODE = boolean_schema(PreferenceName.OFFLINE_MODE.value, False)
DARK_MODE = boolean_schema(PreferenceName.DARK_MODE.value, False)
DAILY_GOAL = integer_schema(PreferenceName.DAILY_GOAL.value, DEFAULT_DAILY_GOAL_XP, normalize=clamp_daily_goal)
TARGET_EXAM = enum_schema(PreferenceName.TARGET_EXAM.value, TargetExam, TargetExam.GENERAL)

PREFERENCE_SCHEMAS: Dict[PreferenceName, RecordSchema[Any]] = {
    PreferenceName.NOTIFICATIONS_ENABLED: NOTIFICATIONS_ENABLED,
    PreferenceName.SOUND_ENABLED: SOUND_ENABLED,
    PreferenceName.OFFLINE_MODE: OFFLINE_MODE,
    PreferenceName.DARK_MODE: DARK_MODE,
    PreferenceName.DAILY_GOAL: DAILY_GOAL,
    PreferenceName.TARGET_EXAM: TARGET_EXAM,
}


def resolve_preference_name(name: Union[str, PreferenceName]) -> PreferenceName:
    try:
        return PreferenceName(name)
    except ValueError as exc:
        raise ContractViolationError(f"Unknown preference '{name}'.") from exc


def _require_bool(name: PreferenceName, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ContractViolationError(f"Preference '{name.value}' expects a bool, got {type(value).__name__}.")
    return value


class PreferencesManager:
    """Getter/setter pairs for each preference.

    Every setter writes through immediately and returns the value that is
    now in effect, which can differ from the request for the daily goal.
    """

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    def _set_flag(self, name: PreferenceName, value: Any) -> bool:
        flag = _require_bool(name, value)
        return self._records.set(PREFERENCE_SCHEMAS[name], flag)

    def get_notifications_enabled(self) -> bool:
        return self._records.get(NOTIFICATIONS_ENABLED)

    def set_notifications_enabled(self, value: bool) -> bool:
        return self._set_flag(PreferenceName.NOTIFICATIONS_ENABLED, value)

    def get_sound_enabled(self) -> bool:
        return self._records.get(SOUND_ENABLED)

    def set_sound_enabled(self, value: bool) -> bool:
        return self._set_flag(PreferenceName.SOUND_ENABLED, value)

    def get_offline_mode(self) -> bool:
        return self._records.get(OFFLINE_MODE)

    def set_offline_mode(self, value: bool) -> bool:
        return self._set_flag(PreferenceName.OFFLINE_MODE, value)

    def get_dark_mode(self) -> bool:
        return self._records.get(DARK_MODE)

    def set_dark_mode(self, value: bool) -> bool:
        return self._set_flag(PreferenceName.DARK_MODE, value)

    def get_daily_goal(self) -> int:
        return self._records.get(DAILY_GOAL)

    def set_daily_goal(self, value: int) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ContractViolationError(f"Daily goal expects an int, got {type(value).__name__}.")
        effective = clamp_daily_goal(value)
        if effective != value:
            logger.debug("Clamped daily goal %s to %s", value, effective)
        return self._records.set(DAILY_GOAL, effective)

    def increase_daily_goal(self) -> int:
        return self.set_daily_goal(self.get_daily_goal() + DAILY_GOAL_STEP)

    def decrease_daily_goal(self) -> int:
        return self.set_daily_goal(self.get_daily_goal() - DAILY_GOAL_STEP)

    def get_target_exam(self) -> TargetExam:
        return self._records.get(TARGET_EXAM)

    def set_target_exam(self, value: Union[TargetExam, str]) -> TargetExam:
        if isinstance(value, TargetExam):
            exam = value
        elif isinstance(value, str):
            try:
                exam = TargetExam(value)
            except ValueError as exc:
                raise ContractViolationError(f"'{value}' is not a supported target exam.") from exc
        else:
            raise ContractViolationError(f"Target exam expects a TargetExam, got {type(value).__name__}.")
        return self._records.set(TARGET_EXAM, exam)

    def get(self, name: Union[str, PreferenceName]) -> Any:
        return self._getters()[resolve_preference_name(name)]()

    def set(self, name: Union[str, PreferenceName], value: Any) -> Any:
        return self._setters()[resolve_preference_name(name)](value)

    def snapshot(self) -> Preferences:
        return Preferences(
            notifications_enabled=self.get_notifications_enabled(),
            sound_enabled=self.get_sound_enabled(),
            offline_mode=self.get_offline_mode(),
            dark_mode=self.get_dark_mode(),
            daily_goal_xp=self.get_daily_goal(),
            target_exam=self.get_target_exam(),
        )

    def _getters(self) -> Dict[PreferenceName, Callable[[], Any]]:
        return {
            PreferenceName.NOTIFICATIONS_ENABLED: self.get_notifications_enabled,
            PreferenceName.SOUND_ENABLED: self.get_sound_enabled,
            PreferenceName.OFFLINE_MODE: self.get_offline_mode,
            PreferenceName.DARK_MODE: self.get_dark_mode,
            PreferenceName.DAILY_GOAL: self.get_daily_goal,
            PreferenceName.TARGET_EXAM: self.get_target_exam,
        }

    def _setters(self) -> Dict[PreferenceName, Callable[[Any], Any]]:
        return {
            PreferenceName.NOTIFICATIONS_ENABLED: self.set_notifications_enabled,
            PreferenceName.SOUND_ENABLED: self.set_sound_enabled,
            PreferenceName.OFFLINE_MODE: self.set_offline_mode,
            PreferenceName.DARK_MODE: self.set_dark_mode,
            PreferenceName.DAILY_GOAL: self.set_daily_goal,
            PreferenceName.TARGET_EXAM: self.set_target_exam,
        }


__all__ = [
    "PREFERENCE_SCHEMAS",
    "PreferencesManager",
    "clamp_daily_goal",
    "resolve_preference_name",
]
