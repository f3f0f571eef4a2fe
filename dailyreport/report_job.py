# dailyreport/report_job.py
from dataclasses import dataclass, field
from datetime import date
from html import unescape
from typing import Any, Dict, List, Optional, Tuple

from .composer import render_email_html, render_failure_html, write_document
from .config import ReportConfig, load_config
from .elements import Heading, MealPlan, Paragraph, ReportElement, Table
from .errors import build_error_notice
from .extractor import extract_elements
from .html_text import extract_html_table, normalize_html
from .logger import logger
from .mailbox import MailMessage
from .naming import (
    REPORT_SUBJECT_PREFIX,
    expected_report_subject,
    lesson_plan_name,
    local_today,
    meal_plan_name,
    meal_plan_title,
)
from .report_parser import parse_report_text, report_text_from_message
from .storage import PDF_MIME


@dataclass
class ReportServices:
    mailbox: Any
    storage: Any
    documents: Any
    mailer: Any


@dataclass
class ReportResult:
    ok: bool
    message: str
    email_sent: bool = False
    metrics: Dict[str, int] = field(default_factory=dict)


def build_services(creds=None, config: Optional[ReportConfig] = None) -> ReportServices:
    from .docs import GoogleDocs
    from .emailer import SmtpMailer
    from .google_auth import docs_service, drive_service, gmail_service, load_credentials
    from .mailbox import GmailMailbox
    from .storage import DriveStorage

    creds = creds or load_credentials()
    return ReportServices(
        mailbox=GmailMailbox(gmail_service(creds)),
        storage=DriveStorage(drive_service(creds), creds),
        documents=GoogleDocs(docs_service(creds)),
        mailer=SmtpMailer(config.smtp if config else None),
    )


def plain_text(html_body: str) -> str:
    """text/plain alternative for an HTML email body."""
    return unescape(normalize_html(html_body))


def report_subject(today: date) -> str:
    return f"Daily School Report - {today:%a %b %d, %Y}"


def failure_subject(today: date) -> str:
    return f"Daily School Report FAILED - {today:%a %b %d, %Y}"


# ---------- collection steps ----------

def find_report_message(mailbox, today: date, days_back: int = 1,
                        unread_only: bool = False) -> Optional[MailMessage]:
    """Newest message whose subject carries today's 'Classroom Report for ...' line."""
    wanted = expected_report_subject(today).lower()
    threads = mailbox.search_threads(REPORT_SUBJECT_PREFIX, days_back=days_back, unread_only=unread_only)
    for thread in threads:
        for msg in reversed(thread.messages):
            if unread_only and not msg.unread:
                continue
            if wanted in (msg.subject or "").lower():
                return msg
    return None


def classroom_elements(message: Optional[MailMessage], strip_markup: bool = False) -> List[ReportElement]:
    heading = Heading("Classroom Report")
    if message is None:
        return [heading, Paragraph("No classroom report found for today.")]

    rows = parse_report_text(report_text_from_message(message), strip_markup=strip_markup)
    if len(rows) == 1:
        # no time markers in the text; some reports arrive as an HTML table instead
        html_rows = extract_html_table(message.html_body)
        if html_rows:
            logger.debug(f"[REPORT] Using HTML table from report body ({len(html_rows)} rows)")
            rows = html_rows
    return [heading, Table(rows=rows, is_classroom_report=True)]


def lesson_plan_elements(storage, documents, config: ReportConfig, today: date) -> List[ReportElement]:
    heading = Heading("Lesson Plan")
    name = lesson_plan_name(today)
    try:
        storage.get_folder(config.lesson_plan_folder_id)
        files = storage.find_file(config.lesson_plan_folder_id, name)
    except Exception as e:
        logger.warning(f"[DRIVE] Lesson plan lookup failed: {e}")
        return [heading, Paragraph(f"Error accessing lesson plan folder: {e}")]

    if not files:
        logger.info(f"[DRIVE] Lesson plan '{name}' not found")
        return [heading, Paragraph(f"Lesson plan '{name}' not found.")]
    return [heading] + extract_elements(documents, files[0].id, today)


def find_meal_plan(storage, config: ReportConfig, today: date) -> Tuple[MealPlan, List[ReportElement]]:
    """MealPlan plus any note elements to show in the report when it's missing."""
    name = meal_plan_name(today)
    try:
        files = storage.find_file(config.meal_plan_folder_id, name)
        if not files:
            files = storage.find_files_by_title(meal_plan_title(today), PDF_MIME)
    except Exception as e:
        logger.warning(f"[DRIVE] Meal plan lookup failed: {e}")
        return MealPlan(), [Paragraph(f"Error accessing meal plan folder: {e}")]

    if not files:
        logger.info(f"[DRIVE] Meal plan '{name}' not found")
        return MealPlan(), [Paragraph(f"Meal plan '{name}' not found.")]

    f = files[0]
    try:
        image, mime = storage.thumbnail(f.id)
        return MealPlan(image=image, image_mime=mime, url=f.url, name=f.name), []
    except Exception as e:
        logger.warning(f"[DRIVE] Thumbnail for {f.name} unavailable, using link: {e}")
        return MealPlan(url=f.url, name=f.name), []


def host_menu_image(storage, meal: MealPlan, today: date) -> Tuple[Optional[str], Optional[str]]:
    """Upload the menu image so it can be embedded by URL. Returns (url, temp_file_id)."""
    if not meal.image:
        return None, None
    ext = "jpg" if "jpeg" in meal.image_mime else "png"
    try:
        stored = storage.upload_temporary_image(meal.image, f"menu-{today:%Y-%m-%d}.{ext}", meal.image_mime)
        return stored.url, stored.id
    except Exception as e:
        logger.warning(f"[DRIVE] Could not host menu image, falling back to link: {e}")
        return None, None


# ---------- main ----------

def _run(
    config: Optional[ReportConfig],
    services: Optional[ReportServices],
    *,
    email_triggered: bool,
    today: Optional[date] = None,
) -> ReportResult:
    op = "check_for_new_report" if email_triggered else "run_daily_report"
    config = config or load_config()
    recipient = config.recipient
    run_day = today

    try:
        run_day = today or local_today(config.timezone)
        recipient = config.require_recipient()
        doc_id = config.document_id_for(email_triggered)
        services = services or build_services(config=config)

        logger.info(f"[REPORT] {op} for {run_day.isoformat()} -> doc {doc_id}")

        message = find_report_message(
            services.mailbox, run_day,
            days_back=config.lookback_days,
            unread_only=email_triggered,
        )
        if email_triggered and message is None:
            logger.info("[REPORT] No new classroom report; nothing to do")
            return ReportResult(ok=True, message="No new classroom report")

        elements = classroom_elements(message, strip_markup=email_triggered)
        elements += lesson_plan_elements(services.storage, services.documents, config, run_day)
        meal, meal_notes = find_meal_plan(services.storage, config, run_day)
        elements += meal_notes

        image_url, temp_id = host_menu_image(services.storage, meal, run_day)
        menu_url = None if image_url else meal.url
        try:
            write_document(services.documents.writer(doc_id), elements, run_day,
                           menu_image_url=image_url, menu_url=menu_url)
            status = (
                "Here is today's classroom report."
                if message is not None
                else "No classroom report was found for today."
            )
            html = render_email_html(elements, run_day, status,
                                     menu_image_url=image_url, menu_url=menu_url)
            services.mailer.send(report_subject(run_day), html, plain_text(html), [recipient])
        finally:
            if temp_id:
                try:
                    services.storage.delete(temp_id)
                except Exception as e:
                    logger.warning(f"[DRIVE] Could not delete temporary menu image {temp_id}: {e}")

        if email_triggered and message is not None:
            # report already sent; the run stays successful
            try:
                services.mailbox.mark_read(message.id)
            except Exception as e:
                logger.warning(f"[MAIL] Sent report but could not mark {message.id} read: {e}")

        metrics = {
            "report_rows": sum(len(e.rows) - 1 for e in elements if isinstance(e, Table) and e.is_classroom_report),
            "elements": len(elements),
            "menu_image": int(bool(image_url)),
        }
        logger.info(f"[REPORT] {op} done metrics={metrics}")
        return ReportResult(ok=True, message="sent", email_sent=True, metrics=metrics)

    except Exception as e:
        notice = build_error_notice(e, {"op": op})
        logger.error(f"[{notice.code}] {notice.debug} (ref={notice.support_id})", exc_info=True)
        if not recipient:
            return ReportResult(ok=False, message=notice.flash_text())

        failed_day = run_day or date.today()
        try:
            mailer = services.mailer if services else _default_mailer(config)
            html = render_failure_html(notice, failed_day)
            mailer.send(failure_subject(failed_day), html, plain_text(html), [recipient])
        except Exception as send_err:
            logger.error(f"[REPORT] Failure notification could not be sent: {send_err}")
            return ReportResult(ok=False, message=notice.flash_text())
        return ReportResult(ok=False, message=notice.flash_text(), email_sent=True)


def _default_mailer(config: ReportConfig):
    from .emailer import SmtpMailer
    return SmtpMailer(config.smtp)


def run_daily_report(config: Optional[ReportConfig] = None,
                     services: Optional[ReportServices] = None,
                     today: Optional[date] = None) -> ReportResult:
    """Manual run: newest matching report (read or not) -> current document + email."""
    return _run(config, services, email_triggered=False, today=today)


def check_for_new_report(config: Optional[ReportConfig] = None,
                         services: Optional[ReportServices] = None,
                         today: Optional[date] = None) -> ReportResult:
    """Email-triggered run: only acts on an unread report; marks it read after success."""
    return _run(config, services, email_triggered=True, today=today)
