from datetime import date
from unittest.mock import MagicMock

from dailyreport.docs import ListItemBlock, OtherBlock, ParagraphBlock, TableBlock
from dailyreport.elements import ListItem, Paragraph, Table
from dailyreport.extractor import elements_from_blocks, extract_elements, highlight_row_for

WEDNESDAY = date(2026, 10, 21)


def test_highlight_row_for_weekday():
    rows = [["Mon"], ["Tue"], ["Wed"]]
    assert highlight_row_for(rows, WEDNESDAY) == 2


def test_highlight_last_match_wins():
    rows = [["Wednesday - art"], ["Tue"], ["  WED music "], ["Thu"]]
    assert highlight_row_for(rows, WEDNESDAY) == 2


def test_highlight_none_and_empty_rows():
    assert highlight_row_for([["Day"], [], ["Fri"]], WEDNESDAY) == -1
    assert highlight_row_for([], WEDNESDAY) == -1


def test_blocks_map_to_elements():
    blocks = [
        ParagraphBlock("Theme: Fall"),
        ParagraphBlock("   "),
        TableBlock([["Day", "Activity"], ["Mon", "Leaves"], ["Wed", "Apples"]]),
        ListItemBlock("Bring a jacket"),
        OtherBlock("sectionBreak"),
    ]
    out = elements_from_blocks(blocks, WEDNESDAY)
    assert out == [
        Paragraph("Theme: Fall"),
        Table(rows=[["Day", "Activity"], ["Mon", "Leaves"], ["Wed", "Apples"]], highlight_row=2),
        ListItem("- Bring a jacket"),
    ]
    assert out[1].is_classroom_report is False


def test_extract_elements_reads_document():
    documents = MagicMock()
    documents.read_blocks.return_value = [ParagraphBlock("Hello")]
    assert extract_elements(documents, "doc-1", WEDNESDAY) == [Paragraph("Hello")]
    documents.read_blocks.assert_called_once_with("doc-1")


def test_extract_elements_error_becomes_paragraph():
    documents = MagicMock()
    documents.read_blocks.side_effect = RuntimeError("permission denied")
    out = extract_elements(documents, "doc-1", WEDNESDAY)
    assert len(out) == 1
    assert isinstance(out[0], Paragraph)
    assert "permission denied" in out[0].text
