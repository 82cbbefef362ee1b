"""
Password Recovery Interface.

PRIVACY:
- The same message is shown whether or not the email is registered
- The verification token never leaves the wizard
"""

import time

import streamlit as st

from config import get_settings
from portal import SparksClient
from portal.recovery import PasswordRecoveryWizard, RecoveryStep
from portal.theme import get_theme
from portal.timers import format_mmss
from security import validate_password

settings = get_settings()
theme = get_theme()

st.set_page_config(
    page_title="Reset Password - SPARKS",
    page_icon="🔑",
    layout="centered",
)


def init_session_state():
    """Initialize session state variables."""
    if "wizard" not in st.session_state:
        st.session_state.wizard = PasswordRecoveryWizard(
            SparksClient(base_url=settings.api_base_url),
            settings,
        )


def render_alerts(wizard: PasswordRecoveryWizard):
    """Show the server's message verbatim, plus any info notice."""
    if wizard.error:
        st.error(wizard.error)
    if wizard.notice:
        st.info(wizard.notice)


def render_email(wizard: PasswordRecoveryWizard):
    """Step 1: ask for the account email."""
    st.subheader("Forgot your password?")
    st.write("Enter the email address of your account and we will send you a 6-digit code.")

    with st.form("email_form"):
        email = st.text_input("Email address", value=wizard.email, placeholder="you@example.com")
        submitted = st.form_submit_button("Send Code", type="primary", disabled=wizard.in_flight)

        if submitted and wizard.submit_email(email):
            st.rerun()


def render_otp(wizard: PasswordRecoveryWizard):
    """Step 2: six boxes, expiry countdown and resend cooldown."""
    st.subheader("Enter verification code")
    st.write(f"We sent a code to **{wizard.email}**.")

    pasted = st.text_input("Paste code", key="otp_paste", max_chars=wizard.otp.length)
    if pasted and pasted != wizard.otp.code:
        if not wizard.otp.paste(pasted):
            st.warning("Paste a 6-digit code")

    columns = st.columns(wizard.otp.length)
    for index, column in enumerate(columns):
        with column:
            value = st.text_input(
                f"Digit {index + 1}",
                value=wizard.otp.digits[index],
                max_chars=1,
                key=f"otp_{index}_{wizard.otp.code}",
                label_visibility="collapsed",
            )
            if value != wizard.otp.digits[index]:
                if value:
                    wizard.otp.enter(index, value)
                else:
                    wizard.otp.backspace(index)
                st.rerun()

    if wizard.code_expired:
        st.warning("Your code has expired. Please request a new one.")
    else:
        st.caption(f"Code expires in {format_mmss(wizard.time_remaining)}")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Verify", type="primary", disabled=not wizard.can_verify, use_container_width=True):
            if wizard.verify():
                st.rerun()
    with col2:
        label = "Resend Code" if wizard.can_resend else f"Resend in {wizard.resend_cooldown}s"
        if st.button(label, disabled=not wizard.can_resend, use_container_width=True):
            wizard.resend()
            st.rerun()


def render_password(wizard: PasswordRecoveryWizard):
    """Step 3: choose a new password."""
    st.subheader("Create a new password")

    with st.form("password_form"):
        new_password = st.text_input("New password", type="password")
        confirm_password = st.text_input("Confirm password", type="password")

        if new_password:
            check = validate_password(new_password)
            st.caption(f"Strength: {check.strength}")
            for requirement in check.errors:
                st.caption(f"- {requirement}")

        submitted = st.form_submit_button("Reset Password", type="primary")
        if submitted and wizard.submit_password(new_password, confirm_password):
            st.rerun()


def render_success(wizard: PasswordRecoveryWizard):
    """Step 4: confirmation, then back to login."""
    st.success("Your password has been reset.")
    st.write(f"Redirecting to login in {wizard.redirect.remaining} seconds...")
    if wizard.redirect_due:
        wizard.back_to_login()
        st.rerun()
    time.sleep(1)
    st.rerun()


def main():
    """Main application entry point."""
    init_session_state()
    wizard: PasswordRecoveryWizard = st.session_state.wizard

    st.markdown(
        f"<h1 style='color:{theme.primary}'>SPARKS</h1>",
        unsafe_allow_html=True,
    )
    render_alerts(wizard)

    if wizard.step == RecoveryStep.EMAIL:
        render_email(wizard)
    elif wizard.step == RecoveryStep.OTP:
        render_otp(wizard)
    elif wizard.step == RecoveryStep.PASSWORD:
        render_password(wizard)
    else:
        render_success(wizard)

    if wizard.step != RecoveryStep.SUCCESS:
        st.markdown("---")
        if st.button("Back to Login"):
            wizard.back_to_login()
            st.session_state.pop("wizard")
            st.rerun()


if __name__ == "__main__":
    main()
