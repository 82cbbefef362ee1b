"""
Password-recovery wizard: email -> otp -> password -> success.

The wizard is a view-model. Dashboards render it and forward user actions;
it owns the step, the OTP boxes, both OTP timers and the alert text.

PRIVACY:
- The verification token is opaque and only forwarded to the reset call
- Codes and passwords are never logged
"""

import logging
import time
from enum import Enum
from typing import Optional

from config import Settings, get_settings
from portal.client import (
    FormValidationError,
    PortalError,
    RateLimitedError,
    SparksClient,
)
from portal.timers import Clock, Countdown
from security import is_valid_email, validate_password

logger = logging.getLogger(__name__)

EXPIRED_MESSAGE = "Your code has expired. Please request a new one."


class RecoveryStep(str, Enum):
    """Wizard steps, in order."""

    EMAIL = "email"
    OTP = "otp"
    PASSWORD = "password"
    SUCCESS = "success"


class OtpInput:
    """Six single-digit boxes with focus management."""

    def __init__(self, length: int = 6):
        self.length = length
        self.digits: list[str] = [""] * length
        self.focus = 0

    @property
    def code(self) -> str:
        return "".join(self.digits)

    @property
    def is_complete(self) -> bool:
        return all(d.isdigit() for d in self.digits)

    def enter(self, index: int, value: str) -> bool:
        """Store one digit and advance focus; anything else is ignored."""
        if not 0 <= index < self.length:
            return False
        value = value[-1:] if value else ""
        if not value.isdigit():
            return False
        self.digits[index] = value
        self.focus = min(index + 1, self.length - 1)
        return True

    def backspace(self, index: int) -> None:
        """Clear the box, or step back into the previous one when already empty."""
        if not 0 <= index < self.length:
            return
        if self.digits[index]:
            self.digits[index] = ""
            self.focus = index
        elif index > 0:
            self.digits[index - 1] = ""
            self.focus = index - 1

    def paste(self, text: str) -> bool:
        """Distribute a full code across the boxes; partial or non-digit text is rejected."""
        text = (text or "").strip()
        if len(text) != self.length or not text.isdigit():
            return False
        self.digits = list(text)
        self.focus = self.length - 1
        return True

    def clear(self) -> None:
        self.digits = [""] * self.length
        self.focus = 0


class PasswordRecoveryWizard:
    """
    State machine behind the forgot-password screens.

    Transitions only move forward; ``back_to_login`` is the single exit.
    """

    def __init__(
        self,
        client: SparksClient,
        settings: Optional[Settings] = None,
        clock: Clock = time.monotonic,
    ):
        self.client = client
        self.settings = settings or get_settings()
        self.step = RecoveryStep.EMAIL
        self.email = ""
        self.otp = OtpInput(self.settings.otp_length)
        self.verification_token: Optional[str] = None
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        self.in_flight = False
        self.exited = False

        self.expiry = Countdown(clock)
        self.cooldown = Countdown(clock)
        self.redirect = Countdown(clock)

    # Derived state

    @property
    def time_remaining(self) -> int:
        return self.expiry.remaining

    @property
    def resend_cooldown(self) -> int:
        return self.cooldown.remaining

    @property
    def can_resend(self) -> bool:
        return self.step == RecoveryStep.OTP and not self.in_flight and not self.cooldown.running

    @property
    def can_verify(self) -> bool:
        return (
            self.step == RecoveryStep.OTP
            and self.otp.is_complete
            and self.time_remaining > 0
            and not self.in_flight
        )

    @property
    def code_expired(self) -> bool:
        return self.step == RecoveryStep.OTP and self.expiry.started and self.time_remaining == 0

    @property
    def redirect_due(self) -> bool:
        return self.step == RecoveryStep.SUCCESS and not self.redirect.running

    # Actions

    def _call(self, func, *args):
        self.in_flight = True
        try:
            return func(*args)
        finally:
            self.in_flight = False

    def _enter_otp_step(self, cooldown: int) -> None:
        self.step = RecoveryStep.OTP
        self.otp.clear()
        self.expiry.start(self.settings.otp_expiry_seconds)
        self.cooldown.start(cooldown)

    def submit_email(self, email: str) -> bool:
        """Request a code; a rate-limited answer still opens the code step."""
        self.error = None
        self.notice = None
        email = (email or "").strip()
        try:
            if not email:
                raise FormValidationError("Please enter your email address")
            if not is_valid_email(email):
                raise FormValidationError("Please enter a valid email address")
            self._call(self.client.forgot_password, email)
        except RateLimitedError as exc:
            self.email = email
            self._enter_otp_step(exc.remaining_seconds or self.settings.resend_cooldown_seconds)
            self.notice = exc.message
            return True
        except PortalError as exc:
            self.error = exc.message
            return False

        self.email = email
        self._enter_otp_step(self.settings.resend_cooldown_seconds)
        logger.info("Recovery code requested")
        return True

    def verify(self) -> bool:
        """Submit the entered code; blocked unless ``can_verify``."""
        if self.code_expired:
            self.error = EXPIRED_MESSAGE
            return False
        if not self.can_verify:
            return False

        self.error = None
        try:
            response = self._call(self.client.verify_otp, self.email, self.otp.code)
        except PortalError as exc:
            self.error = exc.message
            return False

        self.verification_token = response.verification_token
        self.step = RecoveryStep.PASSWORD
        self.expiry.clear()
        self.cooldown.clear()
        return True

    def resend(self) -> bool:
        """Ask for a fresh code, restarting expiry and cooldown together."""
        if not self.can_resend:
            return False

        self.error = None
        self.notice = None
        try:
            self._call(self.client.forgot_password, self.email)
        except RateLimitedError as exc:
            self.cooldown.start(exc.remaining_seconds or self.settings.resend_cooldown_seconds)
            self.notice = exc.message
            return False
        except PortalError as exc:
            self.error = exc.message
            return False

        self.otp.clear()
        self.expiry.start(self.settings.otp_expiry_seconds)
        self.cooldown.start(self.settings.resend_cooldown_seconds)
        self.notice = "A new verification code has been sent to your email"
        return True

    def submit_password(self, new_password: str, confirm_password: str) -> bool:
        """Validate locally, then reset with the verification token."""
        if self.step != RecoveryStep.PASSWORD:
            return False

        self.error = None
        try:
            if not new_password or not confirm_password:
                raise FormValidationError("Please fill in all fields")
            if new_password != confirm_password:
                raise FormValidationError("Passwords do not match")
            strength = validate_password(new_password)
            if not strength.is_valid:
                raise FormValidationError(strength.message)
            self._call(
                self.client.reset_password,
                self.email,
                self.verification_token,
                new_password,
            )
        except PortalError as exc:
            self.error = exc.message
            return False

        self.step = RecoveryStep.SUCCESS
        self.redirect.start(self.settings.success_redirect_seconds)
        return True

    def back_to_login(self) -> None:
        """Leave the wizard from any step."""
        for timer in (self.expiry, self.cooldown, self.redirect):
            timer.clear()
        self.otp.clear()
        self.verification_token = None
        self.error = None
        self.notice = None
        self.step = RecoveryStep.EMAIL
        self.exited = True
