"""PDF report builder: lays out one lab report on A4 pages.

Page 1 carries the logo, title, report info box and subject photo; the
field sections and the notes/remarks blocks flow below it and onto as many
continuation pages as needed.  Every page is then framed and footed by the
decoration pass before the document is serialized.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from .decorator import DecorationAssets, decorate_pages
from .errors import ReportGenerationError
from .field_specs import build_sections
from .images import EmbeddedImage, load_image, place_image
from .pager import LineElement, Page, Pager, RectElement, TextRun
from .pdf_document import serialize_document
from .pdf_layout import (
    INFO_BOX,
    INFO_LINE_STEP,
    INFO_TEXT_TOP,
    INFO_TEXT_X,
    LOGO_BOX,
    PAGE_W,
    PHOTO_BOX,
    PHOTO_INSET,
    RULE_INSET,
    RULE_Y,
    TITLE_Y,
)
from .report_data import Document, ReportRequest, ReportResult, ReportSettings
from .theme import FONT_B, FS_INFO, FS_TITLE

LOGGER = logging.getLogger(__name__)

NOTES_TITLE = "Notes"
REMARKS_TITLE = "Remarks"


def _safe(v: object, fallback: str = "-") -> str:
    return str(v).strip() if v is not None and str(v).strip() else fallback


def _format_date(value: datetime | date | None, fmt: str) -> str:
    if value is None:
        return "-"
    return value.strftime(fmt)


# ---------------------------------------------------------------------------
# Page 1 header block
# ---------------------------------------------------------------------------


def _draw_first_page_header(
    page: Page,
    request: ReportRequest,
    settings: ReportSettings,
    *,
    logo: EmbeddedImage | None,
    photo: EmbeddedImage | None,
) -> None:
    logo_element = place_image(logo, LOGO_BOX)
    if logo_element is not None:
        page.add(logo_element)

    page.add(
        TextRun(PAGE_W / 2, TITLE_Y, request.kind.title, font=FONT_B, size=FS_TITLE, align="center")
    )
    page.add(LineElement(RULE_INSET, RULE_Y, PAGE_W - RULE_INSET, RULE_Y))

    header = request.header
    page.add(RectElement(INFO_BOX.x, INFO_BOX.y, INFO_BOX.w, INFO_BOX.h))
    info_lines = (
        f"Report no: {_safe(header.identifier)}",
        f"Customer: {_safe(header.subject_name)}",
        f"{request.kind.category_label}: {_safe(header.category)}",
    )
    for idx, text in enumerate(info_lines):
        page.add(TextRun(INFO_TEXT_X, INFO_TEXT_TOP - idx * INFO_LINE_STEP, text, size=FS_INFO))
    date_text = f"Date: {_format_date(header.received_at, settings.date_format)}"
    page.add(TextRun(PAGE_W - 60, INFO_TEXT_TOP, date_text, size=FS_INFO, align="right"))

    # The photo frame is drawn even without a photo.
    page.add(RectElement(PHOTO_BOX.x, PHOTO_BOX.y, PHOTO_BOX.w, PHOTO_BOX.h))
    photo_element = place_image(photo, PHOTO_BOX.inset(PHOTO_INSET))
    if photo_element is not None:
        page.add(photo_element)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def build_document(request: ReportRequest, settings: ReportSettings | None = None) -> Document:
    """Run the content pass and the decoration pass; no bytes are produced."""
    settings = settings or ReportSettings()

    # Decode every asset before laying anything out so a bad image aborts early.
    photo = load_image(request.subject_image, name="subject photo")
    logo = load_image(request.logo_image, name="logo")
    identifier = load_image(request.identifier_image, name="identifier image")
    signature = load_image(request.signature_image, name="signature image")

    pager = Pager()
    _draw_first_page_header(pager.page, request, settings, logo=logo, photo=photo)

    for section in build_sections(request.kind, request.fields):
        pager.place_section(section)

    # Notes and remarks span the full content width on page 1 as well, so long
    # lines may run beneath the photo frame.
    notes = request.notes if request.notes is not None else request.fields.get("notes")
    pager.place_wrapped_block(NOTES_TITLE, notes)
    if request.remark and request.remark.strip():
        pager.place_wrapped_block(REMARKS_TITLE, request.remark)

    pages = pager.finish()
    decorate_pages(
        pages,
        DecorationAssets(logo=logo, identifier=identifier, signature=signature),
        settings,
    )
    return Document(kind=request.kind, header=request.header, pages=pages)


def build_report_pdf(
    request: ReportRequest, settings: ReportSettings | None = None
) -> ReportResult:
    """Build the finished PDF for *request* and return it with its page count."""
    try:
        return _build_canvas_pdf(request, settings)
    except ReportGenerationError:
        LOGGER.error("PDF generation failed for %s.", request.header.identifier, exc_info=True)
        raise
    except Exception as exc:
        LOGGER.error("PDF generation failed for %s.", request.header.identifier, exc_info=True)
        raise ReportGenerationError("PDF generation failed") from exc


def _build_canvas_pdf(request: ReportRequest, settings: ReportSettings | None) -> ReportResult:
    document = build_document(request, settings)
    pdf = serialize_document(document)
    LOGGER.info(
        "Built %s report %s: %d page(s), %d bytes",
        request.kind.value,
        request.header.identifier,
        document.page_count,
        len(pdf),
    )
    return ReportResult(pdf=pdf, page_count=document.page_count)
