# dailyreport/config.py
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .logger import logger

# Only load .env locally (don’t rely on it in Cloud Run)
if os.getenv("K_SERVICE") is None:
    load_dotenv()

DEFAULT_TZ = "America/Los_Angeles"


class ConfigError(Exception):
    """Raised when a required setting is missing."""


@dataclass
class SmtpSettings:
    host: str = "smtp.gmail.com"
    port: int = 587
    username: str = ""   # must be full email for Gmail
    password: str = ""
    from_email: str = ""
    from_name: str = "Daily Report"

    def from_addr(self) -> str:
        name = (self.from_name or "").strip()
        email = (self.from_email or self.username or "").strip()
        if not email:
            raise ConfigError("SMTP_FROM_EMAIL/SMTP_USERNAME not configured")
        if name:
            return f"{name} <{email}>"
        return email


@dataclass
class ReportConfig:
    lesson_plan_folder_id: str = ""
    meal_plan_folder_id: str = ""
    current_document_id: str = ""   # manual runs write here
    auto_document_id: str = ""      # email-triggered runs write here
    recipient: str = ""
    timezone: str = DEFAULT_TZ
    lookback_days: int = 1
    smtp: SmtpSettings = field(default_factory=SmtpSettings)

    def document_id_for(self, email_triggered: bool) -> str:
        doc_id = self.auto_document_id if email_triggered else self.current_document_id
        if not doc_id:
            which = "AUTO_REPORT_DOC_ID" if email_triggered else "CURRENT_REPORT_DOC_ID"
            raise ConfigError(f"{which} is not configured")
        return doc_id

    def require_recipient(self) -> str:
        if not self.recipient or "@" not in self.recipient:
            raise ConfigError("REPORT_RECIPIENT (or SMTP_FROM_EMAIL) is not configured")
        return self.recipient


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid {name} value '{raw}'. Using default: {default}.")
        return default


def load_smtp_settings() -> SmtpSettings:
    username = os.getenv("SMTP_USERNAME", "").strip()
    return SmtpSettings(
        host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
        port=_int_env("SMTP_PORT", 587),
        username=username,
        password=os.getenv("SMTP_PASSWORD", ""),
        from_email=os.getenv("SMTP_FROM_EMAIL", "").strip() or username,
        from_name=os.getenv("SMTP_FROM_NAME", "Daily Report"),
    )


def load_config() -> ReportConfig:
    current = os.getenv("CURRENT_REPORT_DOC_ID", "").strip()
    recipient = (
        os.getenv("REPORT_RECIPIENT")
        or os.getenv("SMTP_FROM_EMAIL")
        or os.getenv("SMTP_USERNAME")
        or ""
    ).strip()
    cfg = ReportConfig(
        lesson_plan_folder_id=os.getenv("LESSON_PLAN_FOLDER_ID", "").strip(),
        meal_plan_folder_id=os.getenv("MEAL_PLAN_FOLDER_ID", "").strip(),
        current_document_id=current,
        auto_document_id=os.getenv("AUTO_REPORT_DOC_ID", "").strip() or current,
        recipient=recipient,
        timezone=os.getenv("DEFAULT_TIMEZONE", DEFAULT_TZ),
        lookback_days=max(1, _int_env("REPORT_LOOKBACK_DAYS", 1)),
        smtp=load_smtp_settings(),
    )

    missing = [
        k for k, v in (
            ("LESSON_PLAN_FOLDER_ID", cfg.lesson_plan_folder_id),
            ("MEAL_PLAN_FOLDER_ID", cfg.meal_plan_folder_id),
            ("CURRENT_REPORT_DOC_ID", cfg.current_document_id),
        ) if not v
    ]
    if missing:
        logger.warning(f"⚠️ Missing report settings: {', '.join(missing)}")  # log, don’t crash
    return cfg
