# dailyreport/elements.py
from dataclasses import dataclass, field
from typing import List, Optional, Union

NO_HIGHLIGHT = -1


@dataclass
class Heading:
    text: str


@dataclass
class Paragraph:
    text: str  # may contain "\n"; each segment becomes its own paragraph


@dataclass
class Table:
    rows: List[List[str]] = field(default_factory=list)
    highlight_row: int = NO_HIGHLIGHT
    is_classroom_report: bool = False

    def __post_init__(self):
        if self.highlight_row != NO_HIGHLIGHT and not (0 <= self.highlight_row < len(self.rows)):
            raise ValueError(
                f"highlight_row {self.highlight_row} out of range for {len(self.rows)} row(s)"
            )


@dataclass
class ListItem:
    text: str


ReportElement = Union[Heading, Paragraph, Table, ListItem]


@dataclass
class MealPlan:
    """
    Monthly menu lookup result.
    image set   -> render the thumbnail
    url only    -> link to the PDF
    neither     -> not found
    """
    image: Optional[bytes] = None
    image_mime: str = "image/png"
    url: Optional[str] = None
    name: Optional[str] = None

    @property
    def found(self) -> bool:
        return bool(self.image or self.url)
