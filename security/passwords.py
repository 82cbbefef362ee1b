"""
Password strength rules and hashing.

PRIVACY:
- Plaintext passwords are never stored or logged
"""

import hashlib
import hmac
import re
import secrets
from dataclasses import dataclass, field
from typing import Literal

PBKDF2_ITERATIONS = 120_000

# (pattern, message) in the order they are reported
PASSWORD_REQUIREMENTS: list[tuple[re.Pattern, str]] = [
    (re.compile(r".{8,}"), "At least 8 characters"),
    (re.compile(r"[A-Z]"), "At least 1 uppercase letter"),
    (re.compile(r"[0-9]"), "At least 1 number"),
    (
        re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]"),
        "At least 1 special character",
    ),
]

Strength = Literal["weak", "medium", "strong"]


@dataclass
class PasswordValidation:
    """Outcome of checking a password against the strength rules."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    strength: Strength = "weak"

    @property
    def message(self) -> str:
        """Errors joined the way they are shown to users."""
        return ". ".join(self.errors)


def validate_password(password: str) -> PasswordValidation:
    """Check a password against every requirement and grade its strength."""
    errors = [
        message for pattern, message in PASSWORD_REQUIREMENTS
        if not pattern.search(password)
    ]
    met = len(PASSWORD_REQUIREMENTS) - len(errors)

    strength: Strength = "weak"
    if met == len(PASSWORD_REQUIREMENTS) and len(password) >= 12:
        strength = "strong"
    elif met >= 3:
        strength = "medium"

    return PasswordValidation(is_valid=not errors, errors=errors, strength=strength)


def hash_password(password: str) -> str:
    """Hash a password as ``salt$digest`` using PBKDF2-SHA256."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS
    ).hex()
    return f"{salt}${digest}"


def check_password(password: str, hashed: str) -> bool:
    """Compare a plaintext password with a stored hash."""
    salt, _, expected = hashed.partition("$")
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS
    ).hex()
    return hmac.compare_digest(digest, expected)
