"""Content pass: vertical cursor, page breaks, and the placed-element model.

The ``Pager`` owns the only mutable layout state (the ``Cursor``) for one
report.  Pages are only ever appended; once ``finish()`` is called the page
sequence is frozen and handed to the decorator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .field_specs import Section
from .pdf_layout import (
    BOTTOM_MARGIN,
    CONTENT_W,
    CONTINUATION_TOP,
    FIRST_PAGE_CONTENT_TOP,
    HEADER_AFTER,
    HEADER_GAP,
    HEADER_HEIGHT,
    LABEL_GAP,
    LEFT_MARGIN,
    LINE_HEIGHT,
)
from .text_wrap import WidthFn, font_width, wrap_text
from .theme import FONT, FONT_B, FS_BODY, FS_HEADING, REPORT_COLORS

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Placed elements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextRun:
    x: float
    y: float
    text: str
    font: str = FONT
    size: float = FS_BODY
    color: str = REPORT_COLORS["ink"]
    align: str = "left"  # "left" | "center" | "right"


@dataclass(frozen=True)
class LineElement:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 1.0
    color: str = REPORT_COLORS["ink"]


@dataclass(frozen=True)
class RectElement:
    x: float
    y: float
    w: float
    h: float
    width: float = 1.0
    color: str = REPORT_COLORS["border"]


@dataclass(frozen=True)
class ImageElement:
    image: Any  # EmbeddedImage
    x: float
    y: float
    w: float
    h: float
    opacity: float = 1.0


Element = TextRun | LineElement | RectElement | ImageElement


@dataclass
class Page:
    index: int
    elements: list[Element] = field(default_factory=list)

    def add(self, element: Element) -> None:
        self.elements.append(element)

    def texts(self) -> list[str]:
        return [el.text for el in self.elements if isinstance(el, TextRun)]


@dataclass
class Cursor:
    page_index: int
    y: float


def estimate_section_height(field_count: int, line_height: float = LINE_HEIGHT) -> float:
    """Conservative height of a section: heading plus one line per field."""
    return HEADER_HEIGHT + field_count * line_height


# ---------------------------------------------------------------------------
# Pager
# ---------------------------------------------------------------------------


class Pager:
    def __init__(
        self,
        *,
        first_page_top: float = FIRST_PAGE_CONTENT_TOP,
        continuation_top: float = CONTINUATION_TOP,
        bottom_margin: float = BOTTOM_MARGIN,
        x: float = LEFT_MARGIN,
        max_width: float = CONTENT_W,
        line_height: float = LINE_HEIGHT,
        body_width: WidthFn | None = None,
        heading_width: WidthFn | None = None,
    ) -> None:
        self.continuation_top = continuation_top
        self.bottom_margin = bottom_margin
        self.x = x
        self.max_width = max_width
        self.line_height = line_height
        self.body_width = body_width or font_width(FONT, FS_BODY)
        self.heading_width = heading_width or font_width(FONT_B, FS_HEADING)
        self.pages: list[Page] = [Page(1)]
        self.cursor = Cursor(page_index=1, y=first_page_top)
        self._fresh = False
        self._finished = False

    @property
    def page(self) -> Page:
        return self.pages[self.cursor.page_index - 1]

    def remaining(self) -> float:
        return self.cursor.y - self.bottom_margin

    def _place(self, element: Element) -> None:
        if self._finished:
            raise RuntimeError("Pager is finished; pages are frozen")
        self.page.add(element)
        self._fresh = False

    def break_page(self) -> Page:
        if self._finished:
            raise RuntimeError("Pager is finished; pages are frozen")
        page = Page(len(self.pages) + 1)
        self.pages.append(page)
        self.cursor.page_index = page.index
        self.cursor.y = self.continuation_top
        self._fresh = True
        LOGGER.debug("Page break -> page %d", page.index)
        return page

    def ensure_space(self, height: float) -> bool:
        """Break the page when *height* does not fit; returns True on a break.

        A freshly allocated page is never broken again, so oversized units
        continue on it instead of producing empty pages.
        """
        if self.remaining() < height and not self._fresh:
            self.break_page()
            return True
        return False

    def place_section_header(self, title: str) -> None:
        self.ensure_space(HEADER_HEIGHT + self.line_height)
        y = self.cursor.y - HEADER_GAP
        color = REPORT_COLORS["heading"]
        self._place(TextRun(self.x, y, title, font=FONT_B, size=FS_HEADING, color=color))
        self._place(LineElement(self.x, y - 2, self.x + self.heading_width(title), y - 2, 1.0, color))
        self.cursor.y = y - HEADER_AFTER

    def place_field(self, label: str, value: str) -> None:
        self.ensure_space(self.line_height)
        label_text = f"{label}:"
        y = self.cursor.y
        self._place(TextRun(self.x, y, label_text, color=REPORT_COLORS["label"]))
        value_x = self.x + self.body_width(label_text) + LABEL_GAP
        self._place(TextRun(value_x, y, value or "-", color=REPORT_COLORS["value"]))
        self.cursor.y -= self.line_height

    def place_section(self, section: Section) -> None:
        self.ensure_space(estimate_section_height(len(section.fields), self.line_height))
        self.place_section_header(section.title)
        for label, value in section.fields:
            self.place_field(label, value)

    def place_wrapped_block(self, title: str, text: str | None) -> int:
        """Place a heading and *text* wrapped to the content width.

        The whole block moves to a new page when its estimated height does
        not fit, like a section.  A block taller than a page continues line
        by line onto following pages.  Returns the number of lines placed.
        """
        lines = wrap_text(text, self.body_width, self.max_width)
        self.ensure_space(estimate_section_height(lines.count(), self.line_height))
        self.place_section_header(title)
        placed = 0
        for line in lines:
            self.ensure_space(self.line_height)
            self._place(TextRun(self.x, self.cursor.y, line, color=REPORT_COLORS["value"]))
            self.cursor.y -= self.line_height
            placed += 1
        return placed

    def finish(self) -> tuple[Page, ...]:
        self._finished = True
        return tuple(self.pages)
