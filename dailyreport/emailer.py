# dailyreport/emailer.py
import smtplib, ssl
from email.message import EmailMessage
from typing import List, Optional

from .config import ConfigError, SmtpSettings, load_smtp_settings
from .logger import logger

AUTH_HINT = (
    "Gmail rejected the credentials. Make sure SMTP_PASSWORD is a 16-character App Password "
    "and SMTP_USERNAME is the full email."
)


def build_message(settings: SmtpSettings, subject: str, html: str, text: str,
                  to_addrs: List[str]) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = subject or "Daily Report"
    msg["From"] = settings.from_addr()
    msg["To"] = ", ".join(to_addrs or [])
    # text first, then add HTML alternative
    msg.set_content(text or "")
    if html:
        msg.add_alternative(html, subtype="html")
    return msg


def send_email(settings: SmtpSettings, subject: str, html: str, text: str, to_addrs: List[str]):
    if not (settings.username and settings.password):
        raise ConfigError("SMTP_USERNAME/SMTP_PASSWORD are not configured")

    msg = build_message(settings, subject, html, text, to_addrs)
    try:
        # STARTTLS (port 587)
        context = ssl.create_default_context()
        with smtplib.SMTP(settings.host, settings.port, timeout=20) as server:
            server.ehlo()
            server.starttls(context=context)
            server.ehlo()
            server.login(settings.username, settings.password)
            server.send_message(msg)
    except smtplib.SMTPAuthenticationError as e:
        detail = (e.smtp_error or b"").decode("utf-8", errors="ignore")
        raise RuntimeError(f"SMTP auth failed (code {e.smtp_code}): {detail}. {AUTH_HINT}") from e
    except smtplib.SMTPException as e:
        raise RuntimeError(f"SMTP error: {type(e).__name__}: {e}") from e
    except OSError as e:
        raise RuntimeError(f"Email send failed: {type(e).__name__}: {e}") from e

    logger.info(f"[MAIL] Sent '{msg['Subject']}' to {len(to_addrs or [])} recipient(s) via {settings.host}")


class SmtpMailer:
    """Mailer used by the report job; settings come from ReportConfig.smtp."""

    def __init__(self, settings: Optional[SmtpSettings] = None):
        self.settings = settings or load_smtp_settings()

    def send(self, subject: str, html: str, text: str, to_addrs: List[str]) -> None:
        send_email(self.settings, subject, html, text, to_addrs)
