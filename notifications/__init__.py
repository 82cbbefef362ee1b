"""Adapters for outbound notifications."""

from notifications.mailer import OtpMailer, SentOtp, get_mailer

__all__ = ["OtpMailer", "SentOtp", "get_mailer"]
