# dailyreport/naming.py
from datetime import date, datetime, timedelta

import pytz

REPORT_SUBJECT_PREFIX = "Classroom Report for"
LESSON_PLAN_PREFIX = "R.C. Lesson Plan"
MEAL_PLAN_SUFFIX = "MAC Menu NV & V PDF.pdf"


def local_today(tz_name: str) -> date:
    now_utc = pytz.utc.localize(datetime.utcnow())
    return now_utc.astimezone(pytz.timezone(tz_name)).date()


def expected_report_subject(today: date) -> str:
    # e.g. "Classroom Report for Monday [19 Oct 2026]"
    return f"{REPORT_SUBJECT_PREFIX} {today:%A} [{today:%d %b %Y}]"


def week_monday(today: date) -> date:
    return today - timedelta(days=today.weekday())


def lesson_plan_name(today: date) -> str:
    return f"{LESSON_PLAN_PREFIX} {week_monday(today):%m-%d-%y}"


def meal_plan_title(today: date) -> str:
    return f"{today:%B} {today.year} MAC Menu"


def meal_plan_name(today: date) -> str:
    return f"{today:%B} {today.year} {MEAL_PLAN_SUFFIX}"


def report_date_title(today: date) -> str:
    return f"Daily Report - {today:%A}, {today:%B} {today.day}, {today.year}"


def weekday_abbrev(today: date) -> str:
    return f"{today:%a}".lower()
