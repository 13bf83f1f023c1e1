"""Records owned by the local state layer."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_DAILY_GOAL_XP = 10
MIN_DAILY_GOAL_XP = 5
MAX_DAILY_GOAL_XP = 100
DAILY_GOAL_STEP = 5


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AuthMode(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"


class TargetExam(str, Enum):
    CAT = "CAT"
    GRE = "GRE"
    GMAT = "GMAT"
    BANK = "BANK"
    SSC = "SSC"
    GATE = "GATE"
    GENERAL = "GENERAL"


class ExamOption(BaseModel):
    """Display metadata for a target exam choice."""

    value: TargetExam
    label: str
    description: str


EXAM_OPTIONS: List[ExamOption] = [
    ExamOption(value=TargetExam.CAT, label="CAT", description="Common Admission Test"),
    ExamOption(value=TargetExam.GRE, label="GRE", description="Graduate Record Examination"),
    ExamOption(value=TargetExam.GMAT, label="GMAT", description="Graduate Management Admission Test"),
    ExamOption(value=TargetExam.BANK, label="Bank Exams", description="Banking sector examinations"),
    ExamOption(value=TargetExam.SSC, label="SSC", description="Staff Selection Commission"),
    ExamOption(value=TargetExam.GATE, label="GATE", description="Graduate Aptitude Test in Engineering"),
    ExamOption(value=TargetExam.GENERAL, label="General", description="General aptitude practice"),
]


def exam_options() -> List[ExamOption]:
    return [option.model_copy() for option in EXAM_OPTIONS]


def describe_exam(exam: TargetExam) -> ExamOption:
    for option in EXAM_OPTIONS:
        if option.value == exam:
            return option.model_copy()
    raise LookupError(f"No display metadata for exam '{exam}'.")


class User(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    username: str
    email: str
    created_at: datetime = Field(default_factory=_now)


class UserStats(BaseModel):
    xp: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    last_active_on: Optional[date] = None


class Progress(BaseModel):
    """Completed levels for a single practice topic."""

    topic_id: str
    completed_levels: List[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=_now)
    last_completed_at: Optional[datetime] = None

    @field_validator("completed_levels")
    @classmethod
    def _dedupe_levels(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))

    def has_level(self, level_id: str) -> bool:
        return level_id in self.completed_levels


class PreferenceName(str, Enum):
    """Preference names double as their storage keys."""

    NOTIFICATIONS_ENABLED = "notifications-enabled"
    SOUND_ENABLED = "sound-enabled"
    OFFLINE_MODE = "offline-mode"
    DARK_MODE = "dark-mode"
    DAILY_GOAL = "daily-goal"
    TARGET_EXAM = "target-exam"


class Preferences(BaseModel):
    """Effective preference values, each independently defaulted."""

    notifications_enabled: bool = True
    sound_enabled: bool = True
    offline_mode: bool = False
    dark_mode: bool = False
    daily_goal_xp: int = Field(default=DEFAULT_DAILY_GOAL_XP, ge=MIN_DAILY_GOAL_XP, le=MAX_DAILY_GOAL_XP)
    target_exam: TargetExam = TargetExam.GENERAL


class AuthResult(BaseModel):
    """Outcome of a login or signup attempt: a user or exactly one error message."""

    user: Optional[User] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user is not None and self.error is None


class ProgressSummary(BaseModel):
    topics: List[Progress] = Field(default_factory=list)
    total_completed_levels: int = 0
    stats: UserStats = Field(default_factory=UserStats)


__all__ = [
    "AuthMode",
    "AuthResult",
    "DAILY_GOAL_STEP",
    "DEFAULT_DAILY_GOAL_XP",
    "EXAM_OPTIONS",
    "ExamOption",
    "MAX_DAILY_GOAL_XP",
    "MIN_DAILY_GOAL_XP",
    "PreferenceName",
    "Progress",
    "ProgressSummary",
    "Preferences",
    "TargetExam",
    "User",
    "UserStats",
    "describe_exam",
    "exam_options",
]
