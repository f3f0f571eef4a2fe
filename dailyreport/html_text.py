# dailyreport/html_text.py
import re
from typing import List

from bs4 import BeautifulSoup

_BLOCK_END_RE = re.compile(r"<br\s*/?>|</(?:p|div|li|tr|td)\s*>", re.I)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACES_RE = re.compile(r"[ \t]{2,}")
_NEWLINES_RE = re.compile(r"\n{2,}")


def normalize_html(html: str) -> str:
    """
    HTML fragment -> plain text.
    Block/line terminators become newlines, remaining tags are dropped,
    &nbsp; becomes a space, then whitespace runs are collapsed.
    """
    s = _BLOCK_END_RE.sub("\n", html or "")
    s = _TAG_RE.sub("", s)
    s = s.replace("&nbsp;", " ").replace("\u00a0", " ")
    s = _SPACES_RE.sub(" ", s)
    s = _NEWLINES_RE.sub("\n", s)
    return s.strip()


def extract_html_table(html: str) -> List[List[str]]:
    """Rows of the first <table> in the HTML, each cell normalized. [] when there is none."""
    if not html or "<table" not in html.lower():
        return []
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        return []

    rows: List[List[str]] = []
    # nested tables are not special-cased: their rows are picked up too
    for tr in table.find_all("tr"):
        cells = [normalize_html(c.decode_contents()) for c in tr.find_all(["td", "th"])]
        if cells:
            rows.append(cells)
    return rows
