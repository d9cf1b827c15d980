"""Input and output data model for the report engine.

``ReportRequest.from_payload`` maps the lab's test-result payload (the shape
posted when a technician saves test results) onto the immutable request the
engine consumes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .field_specs import FIELD_KEYS, ReportKind
from .pager import Page
from .theme import WATERMARK_OPACITY

if TYPE_CHECKING:
    from ..assets import ResolvedAssets

# Keys as sent by the web form; the engine works with snake_case keys.
_PAYLOAD_ALIASES = {
    "reportType": "report_type",
    "uniqueId": "unique_id",
    "customerName": "customer_name",
    "gemstoneType": "gemstone_type",
    "dateReceived": "date_received",
    "cuttingStyleCrown": "cutting_style_crown",
    "cuttingStylePavilion": "cutting_style_pavilion",
    "opticCharacter": "optic_character",
    "refractiveIndex": "refractive_index",
    "specificGravity": "specific_gravity",
    "colorGrade": "color_grade",
    "clarityGrade": "clarity_grade",
    "cutGrade": "cut_grade",
    "uploadedImage": "uploaded_image",
    "qrCodePath": "qr_code_path",
}

DEFAULT_ADDRESS_LINES = (
    "Gem Testing Laboratory, 2nd Floor, Johari Bazaar",
    "Jaipur, Rajasthan 302003, India",
)
DEFAULT_DISCLAIMER = (
    "This report describes the characteristics of the item submitted at the time of "
    "examination using the techniques available to the laboratory. It is not a "
    "valuation or a guarantee. Verify the report number with the laboratory before "
    "relying on it."
)


def _normalize_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {_PAYLOAD_ALIASES.get(key, key): value for key, value in raw.items()}


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_received(value: object) -> datetime | date | None:
    if value is None or isinstance(value, (datetime, date)):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"date_received is not an ISO-8601 date: {value!r}") from None


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReportHeader:
    identifier: str
    subject_name: str = ""
    category: str = ""
    received_at: datetime | date | None = None


@dataclass(frozen=True)
class ReportSettings:
    """Fixed per-lab text printed on every page."""

    signer_name: str = "Preeti Jhalani"
    signer_title: str = "FGA"
    address_lines: tuple[str, str] = DEFAULT_ADDRESS_LINES
    disclaimer: str = DEFAULT_DISCLAIMER
    date_format: str = "%d/%m/%Y"
    watermark_opacity: float = WATERMARK_OPACITY


@dataclass(frozen=True)
class ReportRequest:
    kind: ReportKind
    header: ReportHeader
    fields: Mapping[str, str | None] = field(default_factory=dict)
    notes: str | None = None
    remark: str | None = None
    subject_image: bytes | None = field(default=None, repr=False)
    logo_image: bytes | None = field(default=None, repr=False)
    identifier_image: bytes | None = field(default=None, repr=False)
    signature_image: bytes | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ReportKind.parse(self.kind))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        assets: ResolvedAssets | None = None,
    ) -> ReportRequest:
        data = _normalize_keys(payload)
        packet = _normalize_keys(data.get("packet") or {})
        test = _normalize_keys(data.get("test") or {})
        header = ReportHeader(
            identifier=str(packet.get("unique_id") or "").strip(),
            subject_name=str(packet.get("customer_name") or "").strip(),
            category=str(packet.get("gemstone_type") or "").strip(),
            received_at=_parse_received(packet.get("date_received")),
        )
        fields = {key: _optional_text(test.get(key)) for key in FIELD_KEYS if key in test}
        return cls(
            kind=ReportKind.parse(data.get("report_type")),
            header=header,
            fields=fields,
            notes=_optional_text(test.get("notes")),
            remark=_optional_text(test.get("remark")),
            subject_image=assets.subject_image if assets else None,
            logo_image=assets.logo if assets else None,
            identifier_image=assets.identifier_image if assets else None,
            signature_image=assets.signature if assets else None,
        )


@dataclass(frozen=True)
class Document:
    kind: ReportKind
    header: ReportHeader
    pages: tuple[Page, ...]

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class ReportResult:
    pdf: bytes = field(repr=False)
    page_count: int
