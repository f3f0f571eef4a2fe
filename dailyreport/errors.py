# dailyreport/errors.py
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from googleapiclient.errors import HttpError

from .config import ConfigError


@dataclass
class ErrorNotice:
    code: str                  # short machine code, e.g. "NETWORK_DNS", "SMTP_AUTH"
    title: str                 # short, user-facing title
    user_message: str          # what went wrong, safe to put in an email
    hint: Optional[str] = None # optional extra hint
    support_id: str = ""       # unique ID to correlate logs
    debug: Optional[str] = None  # long detail for logs only

    def flash_text(self) -> str:
        base = f"{self.title}: {self.user_message}"
        if self.hint:
            base += f" - {self.hint}"
        base += f" (ref: {self.support_id})"
        return base


def _is_dns_error(exc: Exception) -> bool:
    msg = str(exc)
    return ("nodename nor servname provided" in msg) or ("Name or service not known" in msg)


def _smtp_is_535(exc: Exception) -> bool:
    if getattr(exc, "smtp_code", None) == 535:
        return True
    # emailer wraps SMTP failures in RuntimeError; look through the chain
    cause = exc.__cause__
    return cause is not None and getattr(cause, "smtp_code", None) == 535


def _google_invalid_grant(exc: Exception) -> bool:
    return "invalid_grant" in str(exc).lower()


def build_error_notice(exc: Exception, context: Optional[Dict[str, Any]] = None) -> ErrorNotice:
    """
    Map raw exceptions to short notices for the failure email.
    The raw exception text is always kept in user_message so the
    report owner can see what broke; 'hint' carries one actionable step.
    """
    ctx = context or {}
    op = ctx.get("op", "operation")
    support_id = uuid.uuid4().hex[:8]
    detail = str(exc) or type(exc).__name__

    # 1) Missing settings
    if isinstance(exc, ConfigError):
        return ErrorNotice(
            code="CONFIG",
            title="Configuration problem",
            user_message=detail,
            hint="Set the missing value in the environment (.env) and rerun.",
            support_id=support_id,
            debug=f"{op}: {exc!r}",
        )

    # 2) SMTP 535: bad creds / app password
    if _smtp_is_535(exc):
        return ErrorNotice(
            code="SMTP_AUTH",
            title="Email send failed",
            user_message=detail,
            hint="Check the SMTP username and app password.",
            support_id=support_id,
            debug=f"{op}: {exc!r}",
        )

    # 3) Google 'invalid_grant': token revoked/expired
    if _google_invalid_grant(exc):
        return ErrorNotice(
            code="GOOGLE_OAUTH_REFRESH",
            title="Google connection expired",
            user_message=detail,
            hint="Delete token.json and authorize again.",
            support_id=support_id,
            debug=f"{op}: {exc!r}",
        )

    # 4) Google API HttpError: surface status
    if isinstance(exc, HttpError):
        status = getattr(exc, "status_code", None) or getattr(getattr(exc, "resp", None), "status", None)
        return ErrorNotice(
            code=f"GOOGLE_API_{status or 'ERR'}",
            title="Google API error",
            user_message=detail,
            hint="Check the document/folder IDs and sharing, then rerun.",
            support_id=support_id,
            debug=f"{op}: {exc!r}",
        )

    # 5) DNS / timeouts / generic network
    if _is_dns_error(exc) or isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return ErrorNotice(
            code="NETWORK",
            title="Network problem",
            user_message=detail,
            hint="The next scheduled check will try again.",
            support_id=support_id,
            debug=f"{op}: {exc!r}",
        )

    # 6) Fallback catch-all
    return ErrorNotice(
        code="UNKNOWN",
        title="Something went wrong",
        user_message=detail,
        hint="Check the service logs for this reference.",
        support_id=support_id,
        debug=f"{op}: {exc!r}",
    )
