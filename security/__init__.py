"""OTP and password primitives."""

from security.otp import (
    TokenCheck,
    generate_otp,
    hash_otp,
    is_expired,
    is_valid_email,
    issue_verification_token,
    otp_expiry,
    read_verification_token,
    sanitize_email,
    verify_otp,
)
from security.passwords import (
    PasswordValidation,
    check_password,
    hash_password,
    validate_password,
)

__all__ = [
    "TokenCheck",
    "generate_otp",
    "hash_otp",
    "verify_otp",
    "otp_expiry",
    "is_expired",
    "issue_verification_token",
    "read_verification_token",
    "is_valid_email",
    "sanitize_email",
    "PasswordValidation",
    "validate_password",
    "hash_password",
    "check_password",
]
