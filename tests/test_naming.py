from datetime import date

from dailyreport.naming import (
    expected_report_subject,
    lesson_plan_name,
    meal_plan_name,
    report_date_title,
    week_monday,
    weekday_abbrev,
)


def test_report_subject():
    assert expected_report_subject(date(2026, 10, 19)) == "Classroom Report for Monday [19 Oct 2026]"
    assert expected_report_subject(date(2026, 11, 4)) == "Classroom Report for Wednesday [04 Nov 2026]"


def test_lesson_plan_keyed_to_monday():
    assert lesson_plan_name(date(2026, 10, 21)) == "R.C. Lesson Plan 10-19-26"
    assert lesson_plan_name(date(2026, 10, 19)) == "R.C. Lesson Plan 10-19-26"
    # Sunday still belongs to the week that started on Monday
    assert week_monday(date(2026, 10, 25)) == date(2026, 10, 19)


def test_meal_plan_name():
    assert meal_plan_name(date(2026, 10, 19)) == "October 2026 MAC Menu NV & V PDF.pdf"


def test_title_and_abbrev():
    assert report_date_title(date(2026, 10, 21)) == "Daily Report - Wednesday, October 21, 2026"
    assert weekday_abbrev(date(2026, 10, 21)) == "wed"
