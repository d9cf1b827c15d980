"""PDF serialization of a finished, decorated document."""

from __future__ import annotations

from io import BytesIO

from reportlab.lib import colors
from reportlab.pdfgen.canvas import Canvas

from .. import __version__
from .errors import SerializationFailure
from .pager import Element, ImageElement, LineElement, RectElement, TextRun
from .pdf_layout import PAGE_SIZE
from .report_data import Document


def _hex(c: str) -> colors.Color:
    return colors.HexColor(c)


def _draw_element(c: Canvas, element: Element) -> None:
    if isinstance(element, TextRun):
        c.setFillColor(_hex(element.color))
        c.setFont(element.font, element.size)
        if element.align == "center":
            c.drawCentredString(element.x, element.y, element.text)
        elif element.align == "right":
            c.drawRightString(element.x, element.y, element.text)
        else:
            c.drawString(element.x, element.y, element.text)
    elif isinstance(element, LineElement):
        c.setStrokeColor(_hex(element.color))
        c.setLineWidth(element.width)
        c.line(element.x1, element.y1, element.x2, element.y2)
    elif isinstance(element, RectElement):
        c.setStrokeColor(_hex(element.color))
        c.setLineWidth(element.width)
        c.rect(element.x, element.y, element.w, element.h, stroke=1, fill=0)
    elif isinstance(element, ImageElement):
        c.saveState()
        if element.opacity < 1.0:
            c.setFillAlpha(element.opacity)
        c.drawImage(
            element.image.reader,
            element.x,
            element.y,
            width=element.w,
            height=element.h,
            mask="auto",
        )
        c.restoreState()
    else:
        raise TypeError(f"Unknown layout element: {element!r}")


def serialize_document(document: Document) -> bytes:
    """Replay every page's elements onto a Canvas and return the PDF bytes."""
    buffer = BytesIO()
    try:
        c = Canvas(buffer, pagesize=PAGE_SIZE, pageCompression=0)
        c.setTitle(f"{document.kind.title} {document.header.identifier}".strip())
        c.setAuthor("gemlab")
        c.setSubject(document.kind.value)
        c.setCreator(f"gemlab {__version__}")
        for page in document.pages:
            for element in page.elements:
                _draw_element(c, element)
            c.showPage()
        c.save()
    except Exception as exc:
        raise SerializationFailure(f"Could not encode report document: {exc}") from exc
    return buffer.getvalue()
