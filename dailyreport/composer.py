# dailyreport/composer.py
import html
from datetime import date
from typing import List, Optional

from .docs import HIGHLIGHT_COLOR
from .elements import Heading, ListItem, Paragraph, ReportElement, Table
from .errors import ErrorNotice
from .naming import report_date_title

MAX_EMAIL_PARAGRAPH_CHARS = 1000
MAX_EMAIL_TABLE_ROWS = 25
ELLIPSIS = "..."
TRUNCATED_NOTE = "(truncated)"
MENU_HEADING = "Today's Menu"
MENU_LINK_TEXT = "Today's Menu (PDF)"


# --- document sink ---------------------------------------------------------------

def write_document(
    writer,
    elements: List[ReportElement],
    today: date,
    menu_image_url: Optional[str] = None,
    menu_url: Optional[str] = None,
) -> None:
    """Replace the target document's content with the report, then commit."""
    writer.clear()
    writer.append_paragraph(report_date_title(today), bold=True, center=True)
    writer.append_paragraph("")

    for el in elements:
        if isinstance(el, Heading):
            writer.append_paragraph(el.text, heading="HEADING_2")
        elif isinstance(el, Paragraph):
            for line in el.text.split("\n"):
                writer.append_paragraph(line)
        elif isinstance(el, Table):
            writer.append_table(el.rows, highlight_row=el.highlight_row, highlight_color=HIGHLIGHT_COLOR)
        elif isinstance(el, ListItem):
            writer.append_list_item(el.text)

    if menu_image_url:
        writer.append_paragraph(MENU_HEADING, heading="HEADING_2")
        writer.append_image(menu_image_url)
    elif menu_url:
        writer.append_link(MENU_LINK_TEXT, menu_url)

    writer.commit()


# --- email sink ------------------------------------------------------------------

def truncate_text(text: str, limit: int = MAX_EMAIL_PARAGRAPH_CHARS) -> str:
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def _esc(text: str) -> str:
    return html.escape(text or "", quote=True)


def _paragraph_html(text: str) -> str:
    return "<p>" + _esc(truncate_text(text)).replace("\n", "<br>") + "</p>"


def email_table_rows(table: Table, max_rows: int = MAX_EMAIL_TABLE_ROWS) -> List[List[str]]:
    """Rows as they appear in the email: capped, and without column 0 unless it's the classroom table."""
    rows = table.rows[:max_rows]
    if table.is_classroom_report:
        return [list(r) for r in rows]
    return [list(r[1:]) for r in rows]


def _table_html(table: Table) -> str:
    rows = email_table_rows(table)
    out = ['<table style="border-collapse:collapse;width:100%;">']
    for i, row in enumerate(rows):
        style = f' style="background-color:{HIGHLIGHT_COLOR};"' if i == table.highlight_row else ""
        cells = "".join(
            f'<td style="border:1px solid #ccc;padding:4px;vertical-align:top;">'
            f'{_esc(c).replace(chr(10), "<br>")}</td>'
            for c in row
        )
        out.append(f"<tr{style}>{cells}</tr>")
    out.append("</table>")
    if len(table.rows) > MAX_EMAIL_TABLE_ROWS:
        out.append(f"<p><em>{TRUNCATED_NOTE}</em></p>")
    return "".join(out)


def render_email_html(
    elements: List[ReportElement],
    today: date,
    status_message: str,
    menu_image_url: Optional[str] = None,
    menu_url: Optional[str] = None,
) -> str:
    parts = [
        "<html><body style=\"font-family:Arial,sans-serif;\">",
        "<p>Good morning!</p>",
        f"<p>{_esc(status_message)}</p>",
        f"<h1>{_esc(report_date_title(today))}</h1>",
    ]
    for el in elements:
        if isinstance(el, Heading):
            parts.append(f"<h2>{_esc(el.text)}</h2>")
        elif isinstance(el, Paragraph):
            parts.append(_paragraph_html(el.text))
        elif isinstance(el, Table):
            parts.append(_table_html(el))
        elif isinstance(el, ListItem):
            parts.append(f"<p>{_esc(el.text)}</p>")

    if menu_image_url:
        parts.append(f"<h2>{MENU_HEADING}</h2>")
        parts.append(f'<img src="{_esc(menu_image_url)}" alt="{MENU_HEADING}" style="max-width:100%;">')
    elif menu_url:
        parts.append(f'<p><a href="{_esc(menu_url)}">{MENU_LINK_TEXT}</a></p>')

    parts.append("</body></html>")
    return "\n".join(parts)


def render_failure_html(notice: ErrorNotice, today: date) -> str:
    hint = f"<p>{_esc(notice.hint)}</p>" if notice.hint else ""
    return (
        "<html><body style=\"font-family:Arial,sans-serif;\">"
        f"<h1>{_esc(report_date_title(today))}</h1>"
        f"<p><strong>{_esc(notice.title)}</strong>: the daily report could not be generated.</p>"
        f"<p>Error: {_esc(notice.user_message)}</p>"
        f"{hint}"
        f"<p style=\"color:#888;\">ref: {_esc(notice.support_id)} ({_esc(notice.code)})</p>"
        "</body></html>"
    )
