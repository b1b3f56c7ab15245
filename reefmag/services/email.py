"""Email service for the password-recovery notice."""

from __future__ import annotations

import smtplib
from email.mime.text import MIMEText

from flask import current_app


def send_password_reset_email(to_email: str, new_password: str) -> bool:
    """
    Send the replacement password to a user.

    Args:
        to_email: Recipient address
        new_password: The freshly generated plaintext password

    Returns:
        True if the message was handed to the relay, False otherwise
    """
    subject = "Your password has been reset"
    login_url = f"{current_app.config['BASE_URL'].rstrip('/')}/login"

    text_body = f"""
Hello,

A password reset was requested for your Reef Magazine account.

Your new password is: {new_password}

Log in at {login_url} and change it as soon as possible.

If you did not request this, please contact us.
"""

    return _send_email(to_email=to_email, subject=subject, text_body=text_body)


def _send_email(to_email: str, subject: str, text_body: str) -> bool:
    """
    Submit a plaintext message to the configured SMTP relay.

    With MAIL_ENABLED off nothing is delivered, so the caller is told it failed.
    """
    config = current_app.config

    if not config.get('MAIL_ENABLED'):
        current_app.logger.warning(f"Email delivery disabled; not sending '{subject}' to {to_email}")
        return False

    smtp_host = config.get('SMTP_HOST')
    smtp_user = config.get('SMTP_USERNAME')
    smtp_password = config.get('SMTP_PASSWORD')
    if not smtp_host:
        current_app.logger.warning("Email delivery enabled but SMTP_HOST is not configured")
        return False

    msg = MIMEText(text_body, 'plain', 'utf-8')
    msg['Subject'] = subject
    msg['From'] = config.get('MAIL_FROM')
    msg['To'] = to_email

    try:
        with smtplib.SMTP(smtp_host, config.get('SMTP_PORT', 587), timeout=30) as server:
            if config.get('SMTP_USE_TLS', True):
                server.starttls()
            if smtp_user and smtp_password:
                server.login(smtp_user, smtp_password)
            # Verify the connection before handing over the message
            code, response = server.noop()
            if code != 250:
                raise smtplib.SMTPResponseException(code, response)
            server.send_message(msg)

        current_app.logger.info(f"Email sent successfully to {to_email}")
        return True

    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.error(f"Failed to send email to {to_email}: {e}")
        return False


__all__ = ["send_password_reset_email"]
