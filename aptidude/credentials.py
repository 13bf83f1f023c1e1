"""Credential rules for the local signup and login forms.

Two layers live here. The per-rule check maps (``username_checks`` and
``password_checks``) drive live feedback while the user types. The
submission check (``validate_submission``) runs the same rules in a fixed
order and reports only the first failure, which is what the form shows when
the user presses the button.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from .errors import CredentialValidationError
from .models import AuthMode

USERNAME_MIN_LENGTH = 5
PASSWORD_MIN_LENGTH = 8
SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{};':\"\\|,.<>/?"

_USERNAME_PARTIAL = re.compile(r"[A-Za-z_]*")
_USERNAME_FULL = re.compile(r"[A-Za-z_]+")
_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")

MSG_FILL_ALL_FIELDS = "Please fill in all fields"
MSG_USERNAME_TOO_SHORT = "Username must be at least 5 characters"
MSG_USERNAME_CHARSET = "Username can only contain letters and underscores"
MSG_PASSWORD_TOO_SHORT = "Password must be at least 8 characters"
MSG_PASSWORD_NO_LETTER = "Password must contain at least 1 letter"
MSG_PASSWORD_NO_NUMBER = "Password must contain at least 1 number"
MSG_PASSWORD_NO_SPECIAL = "Password must contain at least 1 special character (!@#$%^&* etc)"


def username_checks(username: str) -> Dict[str, bool]:
    return {
        "minLength": len(username) >= USERNAME_MIN_LENGTH,
        "validChars": _USERNAME_PARTIAL.fullmatch(username) is not None,
    }


def is_username_valid(username: str) -> bool:
    """Live-feedback gate: an empty field is not flagged yet."""
    return username == "" or all(username_checks(username).values())


def password_checks(password: str) -> Dict[str, bool]:
    return {
        "minLength": len(password) >= PASSWORD_MIN_LENGTH,
        "hasLetter": _LETTER.search(password) is not None,
        "hasNumber": _DIGIT.search(password) is not None,
        "hasSpecial": _SPECIAL.search(password) is not None,
    }


def is_password_valid(password: str) -> bool:
    return all(password_checks(password).values())


def validate_submission(
    mode: AuthMode,
    email: str,
    password: str,
    username: Optional[str] = None,
) -> Optional[str]:
    """Return the first failing rule's message, or ``None`` when the form can be submitted."""
    signup = AuthMode(mode) is AuthMode.SIGNUP
    username = username or ""

    if not email or not password or (signup and not username):
        return MSG_FILL_ALL_FIELDS

    if signup:
        if len(username) < USERNAME_MIN_LENGTH:
            return MSG_USERNAME_TOO_SHORT
        if _USERNAME_FULL.fullmatch(username) is None:
            return MSG_USERNAME_CHARSET

    if len(password) < PASSWORD_MIN_LENGTH:
        return MSG_PASSWORD_TOO_SHORT
    if _LETTER.search(password) is None:
        return MSG_PASSWORD_NO_LETTER
    if _DIGIT.search(password) is None:
        return MSG_PASSWORD_NO_NUMBER
    if _SPECIAL.search(password) is None:
        return MSG_PASSWORD_NO_SPECIAL
    return None


def ensure_valid_submission(
    mode: AuthMode,
    email: str,
    password: str,
    username: Optional[str] = None,
) -> None:
    message = validate_submission(mode, email, password, username=username)
    if message is not None:
        raise CredentialValidationError(message)


__all__ = [
    "MSG_FILL_ALL_FIELDS",
    "MSG_PASSWORD_NO_LETTER",
    "MSG_PASSWORD_NO_NUMBER",
    "MSG_PASSWORD_NO_SPECIAL",
    "MSG_PASSWORD_TOO_SHORT",
    "MSG_USERNAME_CHARSET",
    "MSG_USERNAME_TOO_SHORT",
    "SPECIAL_CHARACTERS",
    "ensure_valid_submission",
    "is_password_valid",
    "is_username_valid",
    "password_checks",
    "username_checks",
    "validate_submission",
]
