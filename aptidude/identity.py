"""Current-user record management."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from .errors import ContractViolationError
from .models import AuthMode, User
from .storage import RecordStore, model_schema

logger = logging.getLogger(__name__)

CURRENT_USER_KEY = "current-user"

CURRENT_USER = model_schema(CURRENT_USER_KEY, User, lambda: None)


def _local_part(email: str) -> str:
    return email.split("@", 1)[0]


class IdentityManager:
    """Owns the single local ``User`` record.

    Input must already have passed credential validation; this class only
    guards against calls that could not have come from a validated form.
    """

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    def create_or_login_user(
        self,
        mode: AuthMode,
        email: str,
        password: str,
        username: Optional[str] = None,
    ) -> User:
        mode = AuthMode(mode)
        if not email or not password:
            raise ContractViolationError("create_or_login_user requires validated email and password.")
        if mode is AuthMode.SIGNUP:
            if not username:
                raise ContractViolationError("Signup requires a validated username.")
            resolved = username
        else:
            resolved = _local_part(email)

        user = User(
            id=str(uuid.uuid4()),
            username=resolved,
            email=email,
            created_at=datetime.now(timezone.utc),
        )
        self._records.set(CURRENT_USER, user)
        logger.info("Stored %s user record for %s", mode.value, user.username)
        return user

    def get_current_user(self) -> Optional[User]:
        return self._records.get(CURRENT_USER)

    def logout(self) -> None:
        # The record stays so a later login on this device finds the same data.
        logger.info("Logout requested; keeping stored user record")


__all__ = ["CURRENT_USER", "CURRENT_USER_KEY", "IdentityManager"]
