"""Decoration pass: identical per-page frame, watermark, signature and footer.

Runs once the content pass has frozen the page sequence, because every page
carries ``Page i of N``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import ReportGenerationError
from .images import EmbeddedImage, place_image
from .pager import Page, RectElement, TextRun
from .pdf_layout import (
    ADDRESS_YS,
    BORDER_BOX,
    DISCLAIMER_LEADING,
    DISCLAIMER_MAX_LINES,
    DISCLAIMER_TOP,
    DISCLAIMER_W,
    IDENTIFIER_BOX,
    PAGE_NUMBER_Y,
    PAGE_W,
    SIGNATURE_BOX,
    SIGNER_NAME_Y,
    SIGNER_RIGHT_X,
    SIGNER_TITLE_Y,
    WATERMARK_BOX,
)
from .report_data import ReportSettings
from .text_wrap import font_width, wrap_text
from .theme import (
    FONT,
    FONT_B,
    FS_ADDRESS,
    FS_DISCLAIMER,
    FS_PAGE_NUMBER,
    FS_SIGNER,
    FS_SIGNER_TITLE,
    REPORT_COLORS,
)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecorationAssets:
    logo: EmbeddedImage | None = None
    identifier: EmbeddedImage | None = None
    signature: EmbeddedImage | None = None


def page_label(index: int, total: int) -> str:
    return f"Page {index} of {total}"


def disclaimer_lines(text: str) -> list[str]:
    """Wrap *text* to the footer band between the identifier and signature.

    Raises :class:`ReportGenerationError` when the wrapped text needs more
    lines than the band holds; nothing is dropped.
    """
    if not text.strip():
        return []
    lines = wrap_text(text, font_width(FONT, FS_DISCLAIMER), DISCLAIMER_W).lines()
    if len(lines) > DISCLAIMER_MAX_LINES:
        raise ReportGenerationError(
            f"Disclaimer needs {len(lines)} lines; the footer band holds {DISCLAIMER_MAX_LINES}"
        )
    return lines


def decorate_pages(
    pages: Sequence[Page],
    assets: DecorationAssets,
    settings: ReportSettings,
) -> None:
    """Append decorations to every page of the finished sequence."""
    total = len(pages)
    legal = disclaimer_lines(settings.disclaimer)
    LOGGER.debug("Decorating %d page(s), %d disclaimer line(s)", total, len(legal))
    center_x = PAGE_W / 2
    muted = REPORT_COLORS["text_muted"]
    for page in pages:
        page.add(RectElement(BORDER_BOX.x, BORDER_BOX.y, BORDER_BOX.w, BORDER_BOX.h))

        watermark = place_image(assets.logo, WATERMARK_BOX, opacity=settings.watermark_opacity)
        if watermark is not None:
            page.add(watermark)

        identifier = place_image(assets.identifier, IDENTIFIER_BOX)
        if identifier is not None:
            page.add(identifier)

        signature = place_image(assets.signature, SIGNATURE_BOX)
        if signature is not None:
            page.add(signature)
        page.add(
            TextRun(
                SIGNER_RIGHT_X,
                SIGNER_NAME_Y,
                settings.signer_name,
                font=FONT_B,
                size=FS_SIGNER,
                align="right",
            )
        )
        page.add(
            TextRun(
                SIGNER_RIGHT_X,
                SIGNER_TITLE_Y,
                settings.signer_title,
                size=FS_SIGNER_TITLE,
                align="right",
            )
        )

        for y, line in zip(ADDRESS_YS, settings.address_lines, strict=False):
            page.add(TextRun(center_x, y, line, size=FS_ADDRESS, align="center"))

        y = DISCLAIMER_TOP
        for line in legal:
            page.add(TextRun(center_x, y, line, size=FS_DISCLAIMER, color=muted, align="center"))
            y -= DISCLAIMER_LEADING

        page.add(
            TextRun(
                center_x,
                PAGE_NUMBER_Y,
                page_label(page.index, total),
                size=FS_PAGE_NUMBER,
                color=REPORT_COLORS["footer"],
                align="center",
            )
        )
