"""gemlab.report – report document composition.

The engine consumes an already-validated ``ReportRequest`` (data plus image
bytes) and returns the finished PDF bytes with their page count.  Asset
retrieval and storage live outside this package (``gemlab.assets``,
``gemlab.report_store``).
"""

from .errors import (
    AssetFetchFailure,
    ReportGenerationError,
    SerializationFailure,
    UnsupportedImageFormat,
)
from .field_specs import ReportKind, build_sections
from .pdf_builder import build_document, build_report_pdf
from .report_data import ReportHeader, ReportRequest, ReportResult, ReportSettings

__all__ = [
    "AssetFetchFailure",
    "ReportGenerationError",
    "ReportHeader",
    "ReportKind",
    "ReportRequest",
    "ReportResult",
    "ReportSettings",
    "SerializationFailure",
    "UnsupportedImageFormat",
    "build_document",
    "build_report_pdf",
    "build_sections",
]
