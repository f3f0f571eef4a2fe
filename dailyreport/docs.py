# dailyreport/docs.py
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .logger import logger

HIGHLIGHT_COLOR = "#FFF2CC"
IMAGE_WIDTH_PT = 450
BULLET_PRESET = "BULLET_DISC_CIRCLE_SQUARE"


# --- read side: top-level content blocks ---------------------------------------

@dataclass
class ParagraphBlock:
    text: str


@dataclass
class TableBlock:
    rows: List[List[str]] = field(default_factory=list)


@dataclass
class ListItemBlock:
    text: str


@dataclass
class OtherBlock:
    kind: str


def _paragraph_text(paragraph: Dict) -> str:
    out = []
    for el in paragraph.get("elements", []):
        run = el.get("textRun")
        if run:
            out.append(run.get("content", ""))
    # soft line breaks come back as vertical tabs
    return "".join(out).replace("\x0b", "\n").rstrip("\n")


def _cell_text(cell: Dict) -> str:
    parts = [
        _paragraph_text(c["paragraph"])
        for c in cell.get("content", [])
        if "paragraph" in c
    ]
    return "\n".join(parts).strip()


def blocks_from_document(doc: Dict) -> list:
    blocks = []
    for el in (doc.get("body") or {}).get("content", []):
        if "paragraph" in el:
            p = el["paragraph"]
            text = _paragraph_text(p)
            if "bullet" in p:
                blocks.append(ListItemBlock(text))
            else:
                blocks.append(ParagraphBlock(text))
        elif "table" in el:
            rows = [
                [_cell_text(cell) for cell in row.get("tableCells", [])]
                for row in el["table"].get("tableRows", [])
            ]
            blocks.append(TableBlock(rows))
        else:
            kind = next((k for k in el if k not in ("startIndex", "endIndex")), "unknown")
            blocks.append(OtherBlock(kind))
    return blocks


# --- write side ------------------------------------------------------------------

def utf16_len(text: str) -> int:
    """Docs indexes count UTF-16 code units, not code points."""
    return len(text.encode("utf-16-le")) // 2


def hex_to_rgb(color: str) -> Dict[str, float]:
    c = color.lstrip("#")
    return {
        "red": int(c[0:2], 16) / 255.0,
        "green": int(c[2:4], 16) / 255.0,
        "blue": int(c[4:6], 16) / 255.0,
    }


def table_cell_index(table_start: int, columns: int, row: int, col: int) -> int:
    """Index of the (empty) paragraph inside cell (row, col) of a fresh table."""
    return table_start + 3 + row * (2 * columns + 1) + 2 * col


def table_size(rows: int, columns: int) -> int:
    return 2 + rows * (2 * columns + 1)


class GoogleDocsWriter:
    """
    Collects Docs API requests that append content at the end of the body,
    tracking the insertion index so everything goes out in one batchUpdate.
    """

    def __init__(self, service, document_id: str):
        self.service = service
        self.document_id = document_id
        self.requests: List[Dict] = []
        self.cursor = 1

    def clear(self) -> None:
        doc = self.service.documents().get(documentId=self.document_id).execute()
        content = (doc.get("body") or {}).get("content", [])
        end = content[-1]["endIndex"] if content else 1
        # the final newline of the body can never be deleted
        if end - 1 > 1:
            self.requests.append({
                "deleteContentRange": {"range": {"startIndex": 1, "endIndex": end - 1}}
            })
        self.cursor = 1

    def append_paragraph(self, text: str, bold: bool = False, center: bool = False,
                         heading: Optional[str] = None) -> None:
        start = self.cursor
        content = (text or "") + "\n"
        n = utf16_len(content)
        self.requests.append({"insertText": {"location": {"index": start}, "text": content}})
        self.requests.append({
            "updateParagraphStyle": {
                "range": {"startIndex": start, "endIndex": start + n},
                "paragraphStyle": {
                    "namedStyleType": heading or "NORMAL_TEXT",
                    "alignment": "CENTER" if center else "START",
                },
                "fields": "namedStyleType,alignment",
            }
        })
        if n > 1:
            self.requests.append({
                "updateTextStyle": {
                    "range": {"startIndex": start, "endIndex": start + n - 1},
                    "textStyle": {"bold": bool(bold)},
                    "fields": "bold",
                }
            })
        self.cursor = start + n

    def append_list_item(self, text: str) -> None:
        start = self.cursor
        self.append_paragraph(text)
        self.requests.append({
            "createParagraphBullets": {
                "range": {"startIndex": start, "endIndex": self.cursor},
                "bulletPreset": BULLET_PRESET,
            }
        })

    def append_link(self, text: str, url: str) -> None:
        start = self.cursor
        self.append_paragraph(text)
        if text:
            self.requests.append({
                "updateTextStyle": {
                    "range": {"startIndex": start, "endIndex": start + utf16_len(text)},
                    "textStyle": {"link": {"url": url}},
                    "fields": "link",
                }
            })

    def append_table(self, rows: List[List[str]], highlight_row: int = -1,
                     highlight_color: str = HIGHLIGHT_COLOR) -> None:
        if not rows:
            return
        n_rows = len(rows)
        n_cols = max(len(r) for r in rows) or 1

        # insertTable puts a newline before the table
        insert_at = self.cursor
        table_start = insert_at + 1
        self.requests.append({
            "insertTable": {"rows": n_rows, "columns": n_cols, "location": {"index": insert_at}}
        })

        if 0 <= highlight_row < n_rows:
            self.requests.append({
                "updateTableCellStyle": {
                    "tableRange": {
                        "tableCellLocation": {
                            "tableStartLocation": {"index": table_start},
                            "rowIndex": highlight_row,
                            "columnIndex": 0,
                        },
                        "rowSpan": 1,
                        "columnSpan": n_cols,
                    },
                    "tableCellStyle": {"backgroundColor": {"color": {"rgbColor": hex_to_rgb(highlight_color)}}},
                    "fields": "backgroundColor",
                }
            })

        # fill back to front so earlier cell indexes stay valid
        inserted = 0
        for r in range(n_rows - 1, -1, -1):
            for c in range(n_cols - 1, -1, -1):
                cell = rows[r][c] if c < len(rows[r]) else ""
                if not cell:
                    continue
                self.requests.append({
                    "insertText": {
                        "location": {"index": table_cell_index(table_start, n_cols, r, c)},
                        "text": cell,
                    }
                })
                inserted += utf16_len(cell)

        self.cursor = table_start + table_size(n_rows, n_cols) + inserted

    def append_image(self, uri: str, width_pt: int = IMAGE_WIDTH_PT) -> None:
        start = self.cursor
        self.requests.append({"insertText": {"location": {"index": start}, "text": "\n"}})
        self.requests.append({
            "insertInlineImage": {
                "location": {"index": start},
                "uri": uri,
                "objectSize": {"width": {"magnitude": width_pt, "unit": "PT"}},
            }
        })
        self.cursor = start + 2

    def commit(self) -> int:
        if not self.requests:
            return 0
        count = len(self.requests)
        self.service.documents().batchUpdate(
            documentId=self.document_id, body={"requests": self.requests}
        ).execute()
        logger.debug(f"[DOCS] Applied {count} request(s) to {self.document_id}")
        self.requests = []
        return count


class GoogleDocs:
    def __init__(self, service):
        self.service = service

    def read_blocks(self, document_id: str) -> list:
        doc = self.service.documents().get(documentId=document_id).execute()
        return blocks_from_document(doc)

    def writer(self, document_id: str) -> GoogleDocsWriter:
        return GoogleDocsWriter(self.service, document_id)
