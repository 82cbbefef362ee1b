"""
Adapter for password-recovery email delivery.

PRIVACY:
- The code itself is handed to the delivery channel only, never logged
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class SentOtp:
    """A delivered recovery code."""

    email: str
    otp: str
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class OtpMailer:
    """
    Email delivery for recovery codes.

    The demo adapter keeps an outbox instead of talking to a mail service.
    """

    def __init__(self):
        self.settings = get_settings()
        self.outbox: list[SentOtp] = []

    def send_otp(self, email: str, otp: str) -> None:
        """
        Deliver a recovery code.

        Args:
            email: Sanitized recipient address
            otp: Plaintext code to deliver
        """
        minutes = self.settings.otp_expiry_seconds // 60
        self.outbox.append(SentOtp(email=email, otp=otp))
        logger.info("Sent password reset code to %s (valid %d minutes)", email, minutes)

    def last_code_for(self, email: str) -> Optional[str]:
        """Most recent code delivered to ``email``."""
        for sent in reversed(self.outbox):
            if sent.email == email:
                return sent.otp
        return None


@lru_cache
def get_mailer() -> OtpMailer:
    """Get the singleton mailer instance."""
    return OtpMailer()
