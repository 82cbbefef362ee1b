"""Tests for the password recovery wizard and its OTP input."""

from datetime import timedelta

import httpx
import pytest

from portal import SparksClient
from portal.client import NETWORK_ERROR_MESSAGE
from portal.recovery import EXPIRED_MESSAGE, OtpInput, PasswordRecoveryWizard, RecoveryStep
from portal.timers import Countdown, format_mmss

EMAIL = "parent@sparks.lk"


@pytest.fixture
def wizard(api, settings, clock) -> PasswordRecoveryWizard:
    return PasswordRecoveryWizard(api, settings, clock)


def age_codes(storage, seconds=61):
    """Pretend the stored codes were issued ``seconds`` ago."""
    for record in storage.otps.list_all():
        record.created_at -= timedelta(seconds=seconds)


class TestCountdown:
    def test_counts_down_in_whole_seconds(self, clock):
        timer = Countdown(clock)
        timer.start(60)
        assert timer.remaining == 60
        clock.advance(0.5)
        assert timer.remaining == 60
        clock.advance(30)
        assert timer.remaining == 30
        clock.advance(100)
        assert timer.remaining == 0
        assert not timer.running

    def test_unstarted_and_cleared(self, clock):
        timer = Countdown(clock)
        assert timer.remaining == 0
        timer.start(10)
        timer.clear()
        assert timer.remaining == 0
        assert not timer.started

    def test_format_mmss(self):
        assert format_mmss(600) == "10:00"
        assert format_mmss(59) == "0:59"
        assert format_mmss(-5) == "0:00"


class TestOtpInput:
    """Tests for the six-box OTP input."""

    def test_paste_distributes_digits(self):
        otp = OtpInput()
        assert otp.paste("482913")
        assert otp.digits == ["4", "8", "2", "9", "1", "3"]
        assert otp.is_complete
        assert otp.code == "482913"

    def test_paste_strips_whitespace(self):
        otp = OtpInput()
        assert otp.paste("  482913\n")
        assert otp.code == "482913"

    @pytest.mark.parametrize("text", ["48a913", "48291", "4829134", "abcdef", ""])
    def test_paste_rejects_anything_else_without_partial_fill(self, text):
        otp = OtpInput()
        otp.enter(0, "7")
        assert not otp.paste(text)
        assert otp.digits == ["7", "", "", "", "", ""]

    def test_enter_advances_focus_and_ignores_non_digits(self):
        otp = OtpInput()
        assert otp.enter(0, "1")
        assert otp.focus == 1
        assert not otp.enter(1, "x")
        assert otp.digits[1] == ""
        assert otp.focus == 1

    def test_enter_on_last_box_keeps_focus(self):
        otp = OtpInput()
        otp.enter(5, "9")
        assert otp.focus == 5

    def test_backspace_moves_to_previous_when_empty(self):
        otp = OtpInput()
        otp.paste("123456")
        otp.backspace(3)
        assert otp.digits[3] == ""
        assert otp.focus == 3
        otp.backspace(3)
        assert otp.digits[2] == ""
        assert otp.focus == 2

    def test_clear(self):
        otp = OtpInput()
        otp.paste("123456")
        otp.clear()
        assert otp.code == ""
        assert otp.focus == 0
        assert not otp.is_complete


class TestEmailStep:
    """Tests for the email step."""

    def test_submit_moves_to_otp_with_fresh_timers(self, wizard):
        """A 200 answer opens the code step with both countdowns running."""
        assert wizard.submit_email("user@test.com")
        assert wizard.step == RecoveryStep.OTP
        assert wizard.time_remaining == 600
        assert wizard.resend_cooldown == 60
        assert wizard.can_resend is False
        assert wizard.error is None

    def test_blank_and_invalid_email_never_reach_the_server(self, wizard, mailer):
        assert not wizard.submit_email("   ")
        assert wizard.error == "Please enter your email address"
        assert not wizard.submit_email("parent@sparks")
        assert wizard.error == "Please enter a valid email address"
        assert not wizard.submit_email("parent@spa..rks.lk")
        assert wizard.error == "Please enter a valid email address"
        assert wizard.step == RecoveryStep.EMAIL
        assert mailer.outbox == []

    def test_rate_limited_request_starts_cooldown(self, api, settings, clock):
        PasswordRecoveryWizard(api, settings, clock).submit_email(EMAIL)
        wizard = PasswordRecoveryWizard(api, settings, clock)

        assert wizard.submit_email(EMAIL)
        assert wizard.step == RecoveryStep.OTP
        assert 1 <= wizard.resend_cooldown <= 60
        assert wizard.time_remaining == 600
        assert wizard.error is None
        assert "seconds before requesting a new code" in wizard.notice

    def test_network_failure_shows_fixed_message(self, settings, clock):
        def unreachable(request):
            raise httpx.ConnectError("unreachable", request=request)

        http = httpx.Client(transport=httpx.MockTransport(unreachable), base_url="http://sparks.test")
        wizard = PasswordRecoveryWizard(SparksClient(http=http), settings, clock)
        assert not wizard.submit_email(EMAIL)
        assert wizard.error == NETWORK_ERROR_MESSAGE
        assert wizard.step == RecoveryStep.EMAIL


class TestOtpStep:
    """Tests for verification, expiry and resend."""

    def test_expired_code_blocks_verify(self, wizard, clock, fresh_storage):
        """At zero time the verify control is disabled whatever is entered."""
        wizard.submit_email(EMAIL)
        wizard.otp.paste("123456")
        assert wizard.can_verify

        clock.advance(600)
        assert wizard.time_remaining == 0
        assert wizard.can_verify is False
        assert wizard.verify() is False
        assert wizard.error == EXPIRED_MESSAGE
        assert fresh_storage.otps.list_all()[0].attempts == 0

    def test_incomplete_code_blocks_verify(self, wizard, fresh_storage):
        wizard.submit_email(EMAIL)
        wizard.otp.enter(0, "1")
        assert wizard.verify() is False
        assert fresh_storage.otps.list_all()[0].attempts == 0

    def test_server_error_is_shown_verbatim(self, wizard):
        wizard.submit_email(EMAIL)
        wizard.otp.paste("000000")
        assert wizard.verify() is False
        assert wizard.error == "Invalid OTP code. 4 attempts remaining"
        assert wizard.step == RecoveryStep.OTP

    def test_resend_restarts_both_countdowns(self, wizard, clock, fresh_storage):
        """Resend resets expiry to 600 and cooldown to 60 together."""
        wizard.submit_email(EMAIL)
        clock.advance(30)
        assert wizard.can_resend is False
        assert wizard.resend() is False

        clock.advance(30)
        assert wizard.resend_cooldown == 0
        assert wizard.can_resend is True
        assert wizard.time_remaining == 540

        age_codes(fresh_storage)
        wizard.otp.paste("123456")
        assert wizard.resend()
        assert wizard.time_remaining == 600
        assert wizard.resend_cooldown == 60
        assert wizard.otp.code == ""

    def test_cooldown_expiry_does_not_touch_code_expiry(self, wizard, clock):
        wizard.submit_email(EMAIL)
        clock.advance(60)
        assert wizard.can_resend
        assert wizard.time_remaining == 540
        clock.advance(100)
        assert wizard.time_remaining == 440

    def test_rate_limited_resend_restarts_cooldown_only(self, wizard, clock):
        wizard.submit_email(EMAIL)
        clock.advance(60)
        assert wizard.resend() is False
        assert 1 <= wizard.resend_cooldown <= 60
        assert wizard.time_remaining == 540


class TestFullFlow:
    def test_email_to_success(self, wizard, clock, mailer, fresh_storage):
        assert wizard.submit_email(EMAIL)
        assert wizard.otp.paste(mailer.last_code_for(EMAIL))
        assert wizard.verify()
        assert wizard.step == RecoveryStep.PASSWORD
        assert wizard.verification_token

        assert not wizard.submit_password("NewSparks#2030", "NewSparks#2031")
        assert wizard.error == "Passwords do not match"
        assert not wizard.submit_password("weakpass", "weakpass")
        assert wizard.error.startswith("At least 1 uppercase letter")
        assert wizard.step == RecoveryStep.PASSWORD

        assert wizard.submit_password("NewSparks#2030", "NewSparks#2030")
        assert wizard.step == RecoveryStep.SUCCESS
        assert wizard.redirect_due is False
        clock.advance(3)
        assert wizard.redirect_due is True

    def test_back_to_login_clears_everything(self, wizard):
        wizard.submit_email(EMAIL)
        wizard.back_to_login()
        assert wizard.exited
        assert wizard.step == RecoveryStep.EMAIL
        assert wizard.time_remaining == 0
        assert wizard.resend_cooldown == 0
