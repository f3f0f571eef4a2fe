# dailyreport/extractor.py
from datetime import date
from typing import List

from .docs import ListItemBlock, ParagraphBlock, TableBlock
from .elements import NO_HIGHLIGHT, ListItem, Paragraph, ReportElement, Table
from .logger import logger
from .naming import weekday_abbrev


def highlight_row_for(rows: List[List[str]], today: date) -> int:
    """
    Index of the row whose first cell starts with today's weekday ("wed").
    Rows are scanned top to bottom and the last match is kept.
    """
    abbrev = weekday_abbrev(today)
    found = NO_HIGHLIGHT
    for i, row in enumerate(rows):
        if row and row[0].strip().lower().startswith(abbrev):
            found = i
    return found


def elements_from_blocks(blocks: list, today: date) -> List[ReportElement]:
    out: List[ReportElement] = []
    for block in blocks:
        if isinstance(block, ParagraphBlock):
            if block.text.strip():
                out.append(Paragraph(block.text))
        elif isinstance(block, TableBlock):
            rows = [list(r) for r in block.rows]
            out.append(Table(rows=rows, highlight_row=highlight_row_for(rows, today)))
        elif isinstance(block, ListItemBlock):
            out.append(ListItem("- " + block.text))
        # section breaks, TOCs, etc. are skipped
    return out


def extract_elements(documents, document_id: str, today: date) -> List[ReportElement]:
    """Lesson plan document -> report elements; a read failure becomes one Paragraph."""
    try:
        blocks = documents.read_blocks(document_id)
    except Exception as e:
        logger.warning(f"[DOCS] Could not read document {document_id}: {e}")
        return [Paragraph(f"Error reading lesson plan: {e}")]

    elements = elements_from_blocks(blocks, today)
    logger.debug(f"[DOCS] {len(blocks)} block(s) -> {len(elements)} element(s) from {document_id}")
    return elements
