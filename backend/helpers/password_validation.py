"""
Password validation helper.

Citizens sign up from public kiosks and phones, so the default policy only
enforces a minimum length; stricter character-class rules can be switched on
per requirements object.
"""

import re
from dataclasses import dataclass, field
from typing import List

from models.config import settings


@dataclass
class PasswordRequirements:
    """Password requirements configuration."""

    min_length: int = field(default_factory=lambda: settings.PASSWORD_MIN_LENGTH)
    max_length: int = 72  # bcrypt ignores bytes beyond 72
    require_letter: bool = False
    require_digit: bool = False


DEFAULT_REQUIREMENTS = PasswordRequirements()


def validate_password(
    password: str,
    requirements: PasswordRequirements = DEFAULT_REQUIREMENTS,
) -> tuple[bool, List[str]]:
    """
    Validate a password against the requirements.

    Args:
        password: Password to validate
        requirements: Password requirements configuration

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    errors: List[str] = []

    if len(password) < requirements.min_length:
        errors.append(
            f"Password must be at least {requirements.min_length} characters long"
        )

    if len(password.encode()) > requirements.max_length:
        errors.append(
            f"Password must be at most {requirements.max_length} bytes long"
        )

    if not password.strip():
        errors.append("Password must not be blank")

    if requirements.require_letter and not re.search(r"[A-Za-z]", password):
        errors.append("Password must contain at least one letter")

    if requirements.require_digit and not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")

    return len(errors) == 0, errors
