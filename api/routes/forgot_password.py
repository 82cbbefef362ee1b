"""
Password recovery routes (email -> OTP -> new password).

PRIVACY:
- Same answer for known and unknown emails
- OTPs stored hashed, limited attempts, short expiry
- Reset requires a signed verification token for the same email
"""

import logging
import math
import re
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException

from api.models import MessageResponse, OtpRecord
from api.models.auth import (
    ForgotPasswordRequest,
    RateLimitBody,
    ResetPasswordRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from config import get_settings
from notifications import get_mailer
from security import (
    generate_otp,
    hash_otp,
    hash_password,
    is_expired,
    is_valid_email,
    issue_verification_token,
    otp_expiry,
    read_verification_token,
    sanitize_email,
    validate_password,
    verify_otp,
)
from storage import SparksStorage, get_storage, new_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/mobile/forgot-password", tags=["password-recovery"])


def _checked_email(raw: str) -> str:
    if not raw or not is_valid_email(raw.strip()):
        raise HTTPException(status_code=400, detail="Please provide a valid email address")
    return sanitize_email(raw)


def _latest_otp(storage: SparksStorage, email: str, verified: bool) -> Optional[OtpRecord]:
    records = storage.otps.filter(lambda r: r.email == email and r.verified == verified)
    return max(records, key=lambda r: r.created_at, default=None)


@router.post("", response_model=MessageResponse)
def request_code(request: ForgotPasswordRequest):
    """
    Issue a recovery code.

    PRIVACY:
    - Unknown emails get the same 200 answer, nothing is mailed
    """
    email = _checked_email(request.email)
    storage = get_storage()
    settings = get_settings()
    now = datetime.now(timezone.utc)

    pending = _latest_otp(storage, email, verified=False)
    if pending is not None:
        elapsed = (now - pending.created_at).total_seconds()
        if elapsed < settings.resend_cooldown_seconds:
            remaining = math.ceil(settings.resend_cooldown_seconds - elapsed)
            raise HTTPException(
                status_code=429,
                detail=RateLimitBody(
                    error=f"Please wait {remaining} seconds before requesting a new code",
                    remaining_seconds=remaining,
                ).to_wire(),
            )

    for stale in storage.otps.filter(lambda r: r.email == email and not r.verified):
        storage.otps.delete(stale.id)

    otp = generate_otp()
    storage.otps.create(
        OtpRecord(
            id=new_id(),
            email=email,
            otp_hash=hash_otp(otp),
            created_at=now,
            expires_at=otp_expiry(now),
        )
    )

    if storage.find_user_by_email(email) is not None:
        get_mailer().send_otp(email, otp)
    else:
        logger.info("Password reset requested for unknown email %s", email)

    return MessageResponse(
        message="If an account exists for this email, a verification code has been sent"
    )


@router.post("/verify", response_model=VerifyOtpResponse)
def verify_code(request: VerifyOtpRequest):
    """
    Check a recovery code and hand out a verification token.

    PRIVACY:
    - Expired or exhausted codes are deleted
    """
    email = _checked_email(request.email)
    settings = get_settings()
    if not re.fullmatch(rf"\d{{{settings.otp_length}}}", request.otp or ""):
        raise HTTPException(
            status_code=400,
            detail=f"Please provide a valid {settings.otp_length}-digit OTP code",
        )

    storage = get_storage()
    record = _latest_otp(storage, email, verified=False)
    if record is None:
        raise HTTPException(
            status_code=401,
            detail="No verification request found. Please request a new OTP",
        )

    if is_expired(record.expires_at):
        storage.otps.delete(record.id)
        raise HTTPException(status_code=401, detail="OTP has expired. Please request a new one")

    if record.attempts >= settings.otp_max_attempts:
        storage.otps.delete(record.id)
        raise HTTPException(
            status_code=429,
            detail="Maximum attempts exceeded. Please request a new OTP",
        )

    if not verify_otp(request.otp, record.otp_hash):
        record.attempts += 1
        storage.otps.update(record)
        remaining = settings.otp_max_attempts - record.attempts
        plural = "s" if remaining != 1 else ""
        raise HTTPException(
            status_code=401,
            detail={
                "error": f"Invalid OTP code. {remaining} attempt{plural} remaining",
                "remainingAttempts": remaining,
            },
        )

    record.verified = True
    storage.otps.update(record)
    logger.info("Recovery code verified for %s", email)

    return VerifyOtpResponse(
        message="OTP verified successfully",
        verification_token=issue_verification_token(email),
    )


@router.post("/reset", response_model=MessageResponse)
def reset_password(request: ResetPasswordRequest):
    """
    Replace the password after a verified code.

    PRIVACY:
    - Token email must match the submitted email
    - Used and expired codes are cleaned up
    """
    email = _checked_email(request.email)
    if not request.verification_token:
        raise HTTPException(status_code=400, detail="Verification token is required")
    if not request.new_password:
        raise HTTPException(status_code=400, detail="New password is required")

    token = read_verification_token(request.verification_token)
    if not token.valid:
        raise HTTPException(status_code=401, detail="Invalid or expired verification token")
    if token.email != email:
        raise HTTPException(status_code=401, detail="Email mismatch with verification token")

    strength = validate_password(request.new_password)
    if not strength.is_valid:
        raise HTTPException(status_code=400, detail=strength.message)

    storage = get_storage()
    record = _latest_otp(storage, email, verified=True)
    if record is None:
        raise HTTPException(
            status_code=401,
            detail="No verified OTP found. Please verify your OTP first",
        )

    user = storage.find_user_by_email(email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    user.password_hash = hash_password(request.new_password)
    storage.users.update(user)

    storage.otps.delete(record.id)
    for expired in storage.otps.filter(lambda r: r.email == email and is_expired(r.expires_at)):
        storage.otps.delete(expired.id)
    logger.info("Password reset for user %s", user.id)

    return MessageResponse(
        message="Password reset successfully. You can now login with your new password."
    )
