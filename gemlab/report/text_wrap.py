"""Greedy word wrapping against real font metrics."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from reportlab.pdfbase.pdfmetrics import stringWidth

PLACEHOLDER = "-"

WidthFn = Callable[[str], float]


def font_width(font: str, size: float) -> WidthFn:
    """Width function for a standard font at *size* points."""

    def measure(text: str) -> float:
        return stringWidth(text, font, size)

    return measure


class WrappedText:
    """Lines of *text* no wider than *max_width*, produced on demand.

    Iterating twice re-runs the wrap from the start.  A single word wider
    than *max_width* is placed alone on its own line; words are never split.
    """

    def __init__(self, text: str | None, width_fn: WidthFn, max_width: float) -> None:
        self.text = text
        self.width_fn = width_fn
        self.max_width = max_width

    def __iter__(self) -> Iterator[str]:
        if self.text is None or not str(self.text).strip():
            yield PLACEHOLDER
            return
        for paragraph in str(self.text).strip().split("\n"):
            yield from self._wrap_paragraph(paragraph)

    def _wrap_paragraph(self, paragraph: str) -> Iterator[str]:
        words = paragraph.split()
        if not words:
            yield ""
            return
        line = ""
        for word in words:
            candidate = f"{line} {word}" if line else word
            if line and self.width_fn(candidate) > self.max_width:
                yield line
                line = word
            else:
                line = candidate
        if line:
            yield line

    def count(self) -> int:
        return sum(1 for _ in self)

    def lines(self) -> list[str]:
        return list(self)


def wrap_text(text: str | None, width_fn: WidthFn, max_width: float) -> WrappedText:
    return WrappedText(text, width_fn, max_width)
