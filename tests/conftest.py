"""Shared test helpers for the gemlab test suite."""

from __future__ import annotations

from io import BytesIO

import pytest
from PIL import Image

from gemlab.report import ReportHeader, ReportRequest

# ---------------------------------------------------------------------------
# PDF text extraction helpers
# ---------------------------------------------------------------------------


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF byte string using pypdf."""
    return "\n".join(extract_pdf_pages(pdf_bytes))


def extract_pdf_pages(pdf_bytes: bytes) -> list[str]:
    """Extract the text of each page, in page order."""
    from pypdf import PdfReader

    reader = PdfReader(BytesIO(pdf_bytes))
    return [(page.extract_text() or "") for page in reader.pages]


# ---------------------------------------------------------------------------
# Image and request builders
# ---------------------------------------------------------------------------


def image_bytes(fmt: str = "PNG", size: tuple[int, int] = (40, 20), color: str = "red") -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


def make_request(
    kind: str = "gemstone",
    *,
    identifier: str = "GL-0001",
    fields: dict[str, str | None] | None = None,
    notes: str | None = None,
    remark: str | None = None,
    **images: bytes | None,
) -> ReportRequest:
    return ReportRequest(
        kind=kind,
        header=ReportHeader(
            identifier=identifier,
            subject_name="Asha Mehta",
            category="Ruby",
        ),
        fields=fields or {},
        notes=notes,
        remark=remark,
        **images,
    )


def numbered_notes(count: int) -> str:
    """*count* short lines joined by newlines; each one is its own wrapped line."""
    return "\n".join(f"note line {i:03d}" for i in range(1, count + 1))


@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes("PNG", (40, 20))


@pytest.fixture
def jpeg_bytes() -> bytes:
    return image_bytes("JPEG", (30, 60), color="blue")
