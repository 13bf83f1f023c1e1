"""Tests for live-feedback checks and ordered submission validation."""

from __future__ import annotations

import pytest

from aptidude.credentials import (
    MSG_FILL_ALL_FIELDS,
    MSG_PASSWORD_NO_LETTER,
    MSG_PASSWORD_NO_NUMBER,
    MSG_PASSWORD_NO_SPECIAL,
    MSG_PASSWORD_TOO_SHORT,
    MSG_USERNAME_CHARSET,
    MSG_USERNAME_TOO_SHORT,
    SPECIAL_CHARACTERS,
    ensure_valid_submission,
    is_password_valid,
    is_username_valid,
    password_checks,
    username_checks,
    validate_submission,
)
from aptidude.errors import CredentialValidationError
from aptidude.models import AuthMode


@pytest.mark.parametrize(
    ("password", "expected"),
    [
        ("abc123!@", True),
        ("abcdefgh", False),
        ("abc12345", False),
        ("12345678!", False),
        ("abc!@#$%", False),
        ("ab1!", False),
        ("Pass_word9", True),
        ("", False),
    ],
)
def test_password_validity_requires_all_four_rules(password: str, expected: bool) -> None:
    assert is_password_valid(password) is expected
    assert all(password_checks(password).values()) is expected


@pytest.mark.parametrize("special", list(SPECIAL_CHARACTERS))
def test_every_listed_special_character_counts(special: str) -> None:
    assert password_checks(f"abcdef1{special}")["hasSpecial"] is True


def test_characters_outside_special_set_do_not_count() -> None:
    checks = password_checks("abcdef1 ~`")
    assert checks["hasSpecial"] is False
    assert checks["minLength"] is True


def test_password_checks_report_each_rule() -> None:
    assert password_checks("abc") == {
        "minLength": False,
        "hasLetter": True,
        "hasNumber": False,
        "hasSpecial": False,
    }


@pytest.mark.parametrize(
    ("username", "expected"),
    [
        ("", True),
        ("valid_user", True),
        ("abcde", True),
        ("abcd", False),
        ("user1", False),
        ("with space", False),
        ("abcde\n", False),
    ],
)
def test_username_validity(username: str, expected: bool) -> None:
    assert is_username_valid(username) is expected


def test_username_checks_treat_empty_as_valid_charset() -> None:
    assert username_checks("") == {"minLength": False, "validChars": True}
    assert username_checks("ab-") == {"minLength": False, "validChars": False}


def test_empty_fields_reported_first() -> None:
    assert validate_submission(AuthMode.SIGNUP, "", "x", username="ab") == MSG_FILL_ALL_FIELDS
    assert validate_submission(AuthMode.SIGNUP, "a@b.com", "abc123!@", username="") == MSG_FILL_ALL_FIELDS
    assert validate_submission(AuthMode.LOGIN, "a@b.com", "") == MSG_FILL_ALL_FIELDS


def test_username_error_precedes_password_error() -> None:
    message = validate_submission(AuthMode.SIGNUP, "a@b.com", "12345678", username="ab")
    assert message == MSG_USERNAME_TOO_SHORT


def test_charset_error_after_length_check() -> None:
    message = validate_submission(AuthMode.SIGNUP, "a@b.com", "abc123!@", username="bad-name")
    assert message == MSG_USERNAME_CHARSET


@pytest.mark.parametrize(
    ("password", "expected"),
    [
        ("ab1!", MSG_PASSWORD_TOO_SHORT),
        ("12345678", MSG_PASSWORD_NO_LETTER),
        ("abcdefgh", MSG_PASSWORD_NO_NUMBER),
        ("abc12345", MSG_PASSWORD_NO_SPECIAL),
        ("abc123!@", None),
    ],
)
def test_password_rules_in_order(password: str, expected: str | None) -> None:
    assert validate_submission(AuthMode.SIGNUP, "a@b.com", password, username="valid_user") == expected


def test_login_skips_username_rules() -> None:
    assert validate_submission(AuthMode.LOGIN, "jane@example.com", "abc123!@", username="x") is None


def test_validation_is_repeatable() -> None:
    first = validate_submission(AuthMode.SIGNUP, "a@b.com", "abcdefgh", username="ab")
    second = validate_submission(AuthMode.SIGNUP, "a@b.com", "abcdefgh", username="ab")
    assert first == second == MSG_USERNAME_TOO_SHORT


def test_ensure_valid_submission_raises_single_message() -> None:
    with pytest.raises(CredentialValidationError) as excinfo:
        ensure_valid_submission(AuthMode.SIGNUP, "a@b.com", "abc12345", username="valid_user")
    assert excinfo.value.message == MSG_PASSWORD_NO_SPECIAL
    ensure_valid_submission(AuthMode.LOGIN, "a@b.com", "abc123!@")
