"""
One-time password primitives for password recovery.

PRIVACY:
- OTPs are stored hashed, never in plaintext
- Verification tokens are signed and short-lived
"""

import base64
import hashlib
import hmac
import json
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from config import get_settings

logger = logging.getLogger(__name__)

EMAIL_ADAPTER = TypeAdapter(EmailStr)


@dataclass
class TokenCheck:
    """Result of reading a verification token."""

    email: str
    valid: bool


def generate_otp(length: Optional[int] = None) -> str:
    """Generate a random numeric code of exactly ``length`` digits."""
    length = length or get_settings().otp_length
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def hash_otp(otp: str) -> str:
    """Hash an OTP with a random salt as ``salt$digest``."""
    salt = secrets.token_hex(8)
    digest = hashlib.sha256((salt + otp).encode()).hexdigest()
    return f"{salt}${digest}"


def verify_otp(otp: str, hashed: str) -> bool:
    """Check an entered OTP against its stored hash."""
    salt, _, expected = hashed.partition("$")
    digest = hashlib.sha256((salt + otp).encode()).hexdigest()
    return hmac.compare_digest(digest, expected)


def otp_expiry(now: Optional[datetime] = None) -> datetime:
    """Expiry time for an OTP issued at ``now``."""
    now = now or datetime.now(timezone.utc)
    return now + timedelta(seconds=get_settings().otp_expiry_seconds)


def is_expired(expires_at: datetime, now: Optional[datetime] = None) -> bool:
    """Whether ``expires_at`` has passed."""
    now = now or datetime.now(timezone.utc)
    return now > expires_at


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def _b64decode(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _sign(body: str) -> str:
    secret = get_settings().token_secret.encode()
    return _b64encode(hmac.new(secret, body.encode(), hashlib.sha256).digest())


def issue_verification_token(email: str, now: Optional[datetime] = None) -> str:
    """
    Issue the token that authorises a password reset after OTP verification.

    Args:
        email: Sanitized email the OTP was verified for
        now: Issue time (defaults to current UTC time)

    Returns:
        Opaque ``payload.signature`` string
    """
    now = now or datetime.now(timezone.utc)
    expires = now + timedelta(seconds=get_settings().verification_token_expiry_seconds)
    payload = {
        "email": email,
        "exp": int(expires.timestamp()),
        "nonce": secrets.token_hex(16),
    }
    body = _b64encode(json.dumps(payload).encode())
    return f"{body}.{_sign(body)}"


def read_verification_token(token: str, now: Optional[datetime] = None) -> TokenCheck:
    """Decode and check a verification token."""
    now = now or datetime.now(timezone.utc)
    body, _, signature = token.partition(".")
    if not body or not hmac.compare_digest(signature, _sign(body)):
        return TokenCheck(email="", valid=False)

    try:
        payload = json.loads(_b64decode(body))
    except (ValueError, UnicodeDecodeError) as e:
        logger.warning("Unreadable verification token: %s", e)
        return TokenCheck(email="", valid=False)

    email = payload.get("email")
    exp = payload.get("exp")
    if not email or not exp or not payload.get("nonce"):
        return TokenCheck(email="", valid=False)

    if now.timestamp() > exp:
        return TokenCheck(email=email, valid=False)

    return TokenCheck(email=email, valid=True)


def is_valid_email(email: str) -> bool:
    """Whether ``email`` is a deliverable-looking address, per ``EmailStr``."""
    try:
        EMAIL_ADAPTER.validate_python(email)
    except ValidationError:
        return False
    return True


def sanitize_email(email: str) -> str:
    """Normalise an email for lookups."""
    return email.strip().lower()
