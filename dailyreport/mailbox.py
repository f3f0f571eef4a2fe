# dailyreport/mailbox.py
import base64
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .logger import logger


@dataclass
class MailMessage:
    id: str
    subject: str = ""
    plain_body: str = ""
    html_body: str = ""
    unread: bool = False


@dataclass
class MailThread:
    id: str
    messages: List[MailMessage] = field(default_factory=list)


def build_query(subject: str, days_back: int, unread_only: bool = False) -> str:
    parts = [f'subject:"{subject}"', f"newer_than:{max(1, int(days_back))}d"]
    if unread_only:
        parts.append("is:unread")
    return " ".join(parts)


def _parts_iter(p: Optional[Dict]) -> Iterator[Dict]:
    if not p:
        return
    if "parts" in p:
        for c in p["parts"]:
            yield from _parts_iter(c)
    else:
        yield p


def _b64(part: Dict) -> Optional[bytes]:
    data = (part.get("body") or {}).get("data")
    return base64.urlsafe_b64decode(data) if data else None


def _header(msg: Dict, name: str) -> str:
    for h in msg.get("payload", {}).get("headers", []):
        if (h.get("name") or "").lower() == name:
            return h.get("value") or ""
    return ""


def message_from_api(msg: Dict) -> MailMessage:
    plains, htmls = [], []
    for part in _parts_iter(msg.get("payload", {})):
        mime = (part.get("mimeType") or "").lower()
        if mime not in ("text/plain", "text/html"):
            continue
        b = _b64(part)
        if not b:
            continue
        text = b.decode("utf-8", errors="ignore")
        (plains if mime == "text/plain" else htmls).append(text)

    return MailMessage(
        id=msg.get("id", ""),
        subject=_header(msg, "subject"),
        plain_body="\n\n".join(plains).strip(),
        html_body="\n\n".join(htmls).strip(),
        unread="UNREAD" in (msg.get("labelIds") or []),
    )


class GmailMailbox:
    def __init__(self, service):
        self.service = service

    def search_threads(self, subject: str, days_back: int = 1, unread_only: bool = False) -> List[MailThread]:
        """Threads whose subject contains `subject`, newest first (Gmail's order)."""
        q = build_query(subject, days_back, unread_only)
        logger.debug(f"[MAIL] Gmail query: {q}")
        resp = self.service.users().threads().list(userId="me", q=q, maxResults=20).execute()

        threads = []
        for t in resp.get("threads", []):
            full = self.service.users().threads().get(userId="me", id=t["id"], format="full").execute()
            threads.append(MailThread(
                id=t["id"],
                messages=[message_from_api(m) for m in full.get("messages", [])],
            ))
        logger.debug(f"[MAIL] Found {len(threads)} thread(s)")
        return threads

    def mark_read(self, message_id: str) -> None:
        self.service.users().messages().modify(
            userId="me", id=message_id, body={"removeLabelIds": ["UNREAD"]}
        ).execute()
        logger.debug(f"[MAIL] Marked {message_id} read")
