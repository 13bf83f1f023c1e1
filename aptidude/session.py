"""Single entry point presentation code uses to reach the local state layer."""

from __future__ import annotations

import logging
from datetime import date
from functools import lru_cache
from typing import Any, List, Optional, Union

from .config import Settings, get_settings
from .credentials import validate_submission
from .db.session import build_engine, build_session_factory
from .identity import IdentityManager
from .logging_config import configure_logging
from .models import (
    AuthMode,
    AuthResult,
    ExamOption,
    PreferenceName,
    Preferences,
    Progress,
    ProgressSummary,
    User,
    UserStats,
    describe_exam,
    exam_options,
)
from .preferences import PreferencesManager, resolve_preference_name
from .progress import ProgressStore
from .storage import DatabaseBackend, InMemoryBackend, JsonFileBackend, KeyValueBackend, RecordStore
from .telemetry import StateEvent, emit_event

logger = logging.getLogger(__name__)


class SessionFacade:
    """Composes identity, preferences and progress behind one surface.

    ``login``/``signup`` run credential validation before the identity
    manager is touched and report failures as an ``AuthResult`` rather
    than raising. ``reset_all_data`` wipes storage and raises
    ``needs_reinitialize`` so the host can rebuild its screens from
    defaults, the way a full restart would.
    """

    def __init__(self, records: RecordStore) -> None:
        self._records = records
        self._identity = IdentityManager(records)
        self._preferences = PreferencesManager(records)
        self._progress = ProgressStore(records)
        self._authenticated = self._identity.get_current_user() is not None
        self.needs_reinitialize = False

    @property
    def is_authenticated(self) -> bool:
        return self._authenticated

    def _authenticate(
        self,
        mode: AuthMode,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> AuthResult:
        error = validate_submission(mode, email, password, username=username)
        if error is not None:
            emit_event(StateEvent.AUTH_REJECTED, mode=mode, reason=error)
            return AuthResult(error=error)
        user = self._identity.create_or_login_user(mode, email, password, username=username)
        self._authenticated = True
        event = StateEvent.USER_SIGNED_UP if mode is AuthMode.SIGNUP else StateEvent.USER_LOGGED_IN
        emit_event(event, user_id=user.id, username=user.username)
        return AuthResult(user=user)

    def login(self, email: str, password: str) -> AuthResult:
        return self._authenticate(AuthMode.LOGIN, email, password)

    def signup(self, username: str, email: str, password: str) -> AuthResult:
        return self._authenticate(AuthMode.SIGNUP, email, password, username=username)

    def logout(self) -> None:
        user = self._identity.get_current_user()
        self._identity.logout()
        self._authenticated = False
        emit_event(StateEvent.USER_LOGGED_OUT, username=user.username if user else None)

    def get_user(self) -> Optional[User]:
        return self._identity.get_current_user()

    def get_stats(self) -> UserStats:
        return self._progress.get_stats()

    def get_preference(self, name: Union[str, PreferenceName]) -> Any:
        return self._preferences.get(name)

    def set_preference(self, name: Union[str, PreferenceName], value: Any) -> Any:
        resolved = resolve_preference_name(name)
        effective = self._preferences.set(resolved, value)
        emit_event(StateEvent.PREFERENCE_UPDATED, name=resolved, value=effective)
        return effective

    def get_preferences(self) -> Preferences:
        return self._preferences.snapshot()

    def get_exam_options(self) -> List[ExamOption]:
        return exam_options()

    def get_target_exam_option(self) -> ExamOption:
        return describe_exam(self._preferences.get_target_exam())

    def record_level_completion(
        self,
        topic_id: str,
        level_id: str,
        *,
        xp_earned: int = 0,
        active_on: Optional[date] = None,
    ) -> Progress:
        progress = self._progress.record_level_completion(
            topic_id, level_id, xp_earned=xp_earned, active_on=active_on
        )
        emit_event(StateEvent.LEVEL_COMPLETED, topic_id=topic_id, level_id=level_id, xp_earned=xp_earned)
        return progress

    def award_xp(self, amount: int, *, active_on: Optional[date] = None) -> UserStats:
        stats = self._progress.award_xp(amount, active_on=active_on)
        emit_event(StateEvent.XP_AWARDED, amount=amount, total_xp=stats.xp)
        return stats

    def get_progress_summary(self) -> ProgressSummary:
        topics = self._progress.get_all_progress()
        return ProgressSummary(
            topics=topics,
            total_completed_levels=sum(len(topic.completed_levels) for topic in topics),
            stats=self._progress.get_stats(),
        )

    def reset_all_data(self) -> None:
        removed = self._records.remove_all()
        self._authenticated = False
        self.needs_reinitialize = True
        emit_event(StateEvent.DATA_RESET, removed_keys=removed)

    def reinitialize(self) -> None:
        self._authenticated = self._identity.get_current_user() is not None
        self.needs_reinitialize = False


def build_backend(settings: Settings) -> KeyValueBackend:
    if settings.store_backend == "memory":
        return InMemoryBackend()
    if settings.store_backend == "database":
        if not settings.database_url:
            raise RuntimeError("APTIDUDE_DATABASE_URL must be configured for the database backend.")
        engine = build_engine(settings.database_url, echo=settings.database_echo)
        return DatabaseBackend(build_session_factory(engine))
    return JsonFileBackend(settings.store_path)


def build_session(settings: Optional[Settings] = None) -> SessionFacade:
    settings = settings or get_settings()
    backend = build_backend(settings)
    logger.info("Local state layer using %s backend", settings.store_backend)
    return SessionFacade(RecordStore(backend))


@lru_cache
def get_session() -> SessionFacade:
    """Process-wide facade for the embedding app; configures logging on first use."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return build_session(settings)


__all__ = [
    "SessionFacade",
    "build_backend",
    "build_session",
    "get_session",
]
