"""Local persistent state layer for the AptiDude learning app."""

from .errors import ContractViolationError, CredentialValidationError, StorageCorruptionError
from .models import (
    AuthMode,
    AuthResult,
    PreferenceName,
    Preferences,
    Progress,
    ProgressSummary,
    TargetExam,
    User,
    UserStats,
)
from .session import SessionFacade, build_session, get_session

__version__ = "1.0.0"

__all__ = [
    "AuthMode",
    "AuthResult",
    "ContractViolationError",
    "CredentialValidationError",
    "PreferenceName",
    "Preferences",
    "Progress",
    "ProgressSummary",
    "SessionFacade",
    "StorageCorruptionError",
    "TargetExam",
    "User",
    "UserStats",
    "build_session",
    "get_session",
]
