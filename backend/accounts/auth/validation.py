"""Input validation rules for registration and login."""

from __future__ import annotations

import re
from dataclasses import dataclass

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PASSWORD_MIN_LENGTH = 8
_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")

MSG_NAME_REQUIRED = "Please enter your full name"
MSG_INVALID_EMAIL = "Please enter a valid email address"
MSG_AVATAR_REQUIRED = "Please select an avatar"
MSG_PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
MSG_PASSWORD_CASE = "Password must contain both uppercase and lowercase letters"
MSG_PASSWORD_DIGIT = "Password must contain at least one number"
MSG_PASSWORD_STRONG = "Password is strong"


@dataclass(frozen=True)
class PasswordCheck:
    valid: bool
    message: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(email: str) -> bool:
    """Check the loose ``local@domain.tld`` shape. Surrounding whitespace is ignored."""
    return EMAIL_PATTERN.match(email.strip()) is not None


def validate_password(password: str) -> PasswordCheck:
    """Apply the strength rules in order and report the first one that fails."""
    if _utf16_length(password) < PASSWORD_MIN_LENGTH:
        return PasswordCheck(valid=False, message=MSG_PASSWORD_TOO_SHORT)
    if not _UPPERCASE.search(password) or not _LOWERCASE.search(password):
        return PasswordCheck(valid=False, message=MSG_PASSWORD_CASE)
    if not _DIGIT.search(password):
        return PasswordCheck(valid=False, message=MSG_PASSWORD_DIGIT)
    return PasswordCheck(valid=True, message=MSG_PASSWORD_STRONG)


def _utf16_length(text: str) -> int:
    """Length in UTF-16 code units, so characters outside the BMP count twice."""
    return len(text.encode("utf-16-le")) // 2


def validate_names(first_name: str, last_name: str) -> bool:
    return bool(first_name.strip()) and bool(last_name.strip())
