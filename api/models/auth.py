"""
Password recovery models.

PRIVACY:
- OtpRecord holds a hash only
- Request fields default to empty so routes can answer with their own messages
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from api.models.base import CamelModel, MessageResponse


class OtpRecord(BaseModel):
    """A pending or verified recovery code."""

    id: str
    email: str
    otp_hash: str
    created_at: datetime
    expires_at: datetime
    attempts: int = 0
    verified: bool = False


class ForgotPasswordRequest(CamelModel):
    """Step 1: ask for a code."""

    email: str = ""


class VerifyOtpRequest(CamelModel):
    """Step 2: prove ownership of the email."""

    email: str = ""
    otp: str = ""


class ResetPasswordRequest(CamelModel):
    """Step 3: set the new password."""

    email: str = ""
    verification_token: str = ""
    new_password: str = ""


class VerifyOtpResponse(MessageResponse):
    """Verification succeeded."""

    verification_token: str


class RateLimitBody(CamelModel):
    """Body of a 429 answer."""

    error: str
    remaining_seconds: Optional[int] = None
