"""
Email service for account notifications.

Sends real emails via SMTP when configured, falls back to logging in mock mode.

Environment variables (see config.py):
- SMTP_HOST: SMTP server hostname (e.g., smtp.gmail.com)
- SMTP_PORT: SMTP server port (default: 587 for TLS)
- SMTP_USERNAME: SMTP authentication username
- SMTP_PASSWORD: SMTP authentication password (for Gmail, use App Password)
- SMTP_FROM_EMAIL: Sender email address
- SMTP_FROM_NAME: Sender display name (default: "Menuboard")
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from typing import Optional

from . import config

logger = logging.getLogger(__name__)


def is_email_configured() -> bool:
    """Check if SMTP is properly configured."""
    return all([
        config.SMTP_HOST,
        config.SMTP_USERNAME,
        config.SMTP_PASSWORD,
        config.SMTP_FROM_EMAIL,
    ])


def _send(to_email: str, subject: str, body_text: str, body_html: Optional[str] = None) -> dict:
    """Deliver one message, or log it when SMTP is not configured."""
    if not is_email_configured():
        logger.info("MOCK EMAIL to %s: Subject: %s", to_email, subject)
        return {
            "status": "sent",
            "to_email": to_email,
            "subject": subject,
            "mock": True,
        }

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((config.SMTP_FROM_NAME, config.SMTP_FROM_EMAIL))
        msg["To"] = to_email
        msg.attach(MIMEText(body_text, "plain"))
        if body_html:
            msg.attach(MIMEText(body_html, "html"))

        # Connect and send with secure SSL context
        context = ssl.create_default_context()
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT) as server:
            server.starttls(context=context)
            server.login(config.SMTP_USERNAME, config.SMTP_PASSWORD)
            server.sendmail(config.SMTP_FROM_EMAIL, to_email, msg.as_string())

        logger.info("Email sent to %s: %s", to_email, subject)
        return {
            "status": "sent",
            "to_email": to_email,
            "subject": subject,
            "mock": False,
        }

    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, str(e))
        return {
            "status": "error",
            "to_email": to_email,
            "error": str(e),
            "mock": False,
        }


def send_password_reset_email(to_email: str, name: Optional[str], reset_link: Optional[str]) -> dict:
    """
    Send the password reset message.

    Args:
        to_email: Account email address
        name: Account holder's first name for the greeting
        reset_link: Page the user opens to choose a new password. When None,
                    the message tells the user to continue in the app.

    Returns:
        dict with status and details
    """
    greeting = f"Hi {name}," if name else "Hi,"
    subject = "Reset your password"

    if reset_link:
        body_text = f"""{greeting}

We received a request to reset your password. Open this link to choose a new one:

{reset_link}

If you did not ask for this, you can ignore this email.
"""
        body_html = (
            f"<p>{escape(greeting)}</p>"
            "<p>We received a request to reset your password. Click below to choose a new one:</p>"
            f'<p><a href="{escape(reset_link, quote=True)}" target="_blank" rel="noopener">Reset password</a></p>'
            "<p>If you did not ask for this, you can ignore this email.</p>"
        )
    else:
        body_text = f"""{greeting}

We received a request to reset your password. Open the app and follow the steps.
"""
        body_html = (
            f"<p>{escape(greeting)}</p>"
            "<p>We received a request to reset your password. Open the app and follow the steps.</p>"
        )

    return _send(to_email, subject, body_text, body_html)


def send_welcome_email(to_email: str, name: Optional[str], subdomain: str) -> dict:
    """Send the sign-up confirmation naming the tenant's public subdomain."""
    greeting = f"Hi {name}," if name else "Hi,"
    subject = "Welcome to Menuboard"

    if config.TENANT_BASE_DOMAIN:
        address = f"https://{subdomain}.{config.TENANT_BASE_DOMAIN}"
    else:
        address = f"the subdomain '{subdomain}'"

    body_text = f"""{greeting}

Your account is ready. Your menus will be published at {address}.

Thanks,
Menuboard
"""
    return _send(to_email, subject, body_text)
