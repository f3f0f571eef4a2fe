import pytest

from dailyreport.html_text import extract_html_table, normalize_html


def test_paragraphs_become_lines():
    assert normalize_html("<p>A</p><p>B</p>") == "A\nB"


def test_breaks_and_entities():
    assert normalize_html("Line1<br>Line2<BR/>Line3") == "Line1\nLine2\nLine3"
    assert normalize_html("A&nbsp;&nbsp;B C") == "A B C"


def test_collapses_whitespace_and_trims():
    html = "<div>  one \t\t two </div>\n\n\n<div>three</div>  "
    assert normalize_html(html) == "one two \nthree"


@pytest.mark.parametrize("html", [
    "<p>A</p><p>B</p>",
    "<table><tr><td>x</td><td> y </td></tr></table>",
    "<ul><li>one</li><li>two&nbsp; three</li></ul>\n\n\n",
    "plain   text\t\twith\n\n\nnewlines",
    "",
])
def test_idempotent(html):
    once = normalize_html(html)
    assert normalize_html(once) == once


def test_extract_first_table():
    html = (
        "<p>Intro</p>"
        "<table><tr><th>Time</th><th>Event</th></tr>"
        "<tr><td>8:57 AM</td><td><b>Arrived</b>&nbsp;</td></tr></table>"
        "<table><tr><td>other</td></tr></table>"
    )
    assert extract_html_table(html) == [["Time", "Event"], ["8:57 AM", "Arrived"]]


def test_extract_without_table():
    assert extract_html_table("<p>no table</p>") == []
    assert extract_html_table("") == []
