# dailyreport/report_parser.py
import re
from typing import List

from .html_text import normalize_html

HEADER_ROW = ["Time", "Event"]

# strict "H:MM AM" / "HH:MM pm" shape; kept verbatim in the output
TIME_RE = re.compile(r"\d{1,2}:\d{2}\s*(?:AM|PM)", re.I)

# attribution line the report service appends to every report
BOILERPLATE_RE = re.compile(
    r"\s*Powered by NeatSchool - https://www\.neatschool\.net\s*$", re.I
)

_QUOTE_RE = re.compile(r"(?m)^[ \t]*>+[ \t]?")


def clean_event(text: str, strip_markup: bool = False) -> str:
    ev = (text or "").strip()
    if strip_markup:
        # forwarded/quoted copies: "> 9:15 AM *Snack*"
        ev = _QUOTE_RE.sub("", ev).replace("*", "").strip()
    ev = BOILERPLATE_RE.sub("", ev)
    return ev.strip()


def parse_report_text(text: str, strip_markup: bool = False) -> List[List[str]]:
    """
    Split a classroom report body into [time, event] rows.

    The first row is always ["Time", "Event"]. Each time marker starts an
    event that runs until the next marker (or the end of the text):

        "8:57 AM Arrived. 9:15 AM Snack."
        -> [["Time", "Event"], ["8:57 AM", "Arrived."], ["9:15 AM", "Snack."]]
    """
    table = [list(HEADER_ROW)]
    if not text:
        return table

    matches = list(TIME_RE.finditer(text))
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        table.append([m.group(0), clean_event(text[m.end():end], strip_markup)])
    return table


def report_text_from_message(message) -> str:
    """Plain body when present, otherwise the normalized HTML body."""
    plain = (getattr(message, "plain_body", "") or "").strip()
    if plain:
        return plain
    return normalize_html(getattr(message, "html_body", "") or "")
