"""Static field tables per report kind and the section filter.

Labels are looked up here once per report kind; nothing derives a label
from a field key at request time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class ReportKind(str, Enum):
    GEMSTONE = "gemstone"
    DIAMOND = "diamond"
    JEWELLERY = "jewellery"

    @classmethod
    def parse(cls, value: object) -> ReportKind:
        if isinstance(value, ReportKind):
            return value
        raw = str(value or "").strip().lower()
        if not raw:
            return cls.GEMSTONE
        try:
            return cls(raw)
        except ValueError:
            valid = ", ".join(kind.value for kind in cls)
            raise ValueError(f"Unknown report kind {value!r}; expected one of: {valid}") from None

    @property
    def title(self) -> str:
        return f"{self.value.capitalize()} Report"

    @property
    def category_label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ReportKind.GEMSTONE: "Gemstone",
    ReportKind.DIAMOND: "Stone",
    ReportKind.JEWELLERY: "Article",
}


@dataclass(frozen=True)
class FieldSpec:
    label: str
    key: str


@dataclass(frozen=True)
class SectionSpec:
    title: str
    fields: tuple[FieldSpec, ...]


@dataclass(frozen=True)
class Section:
    """A section that survived filtering, with resolved ``(label, value)`` pairs."""

    title: str
    fields: tuple[tuple[str, str], ...]


def _specs(*pairs: tuple[str, str]) -> tuple[FieldSpec, ...]:
    return tuple(FieldSpec(label, key) for label, key in pairs)


BASIC_INFORMATION = "Basic Information"
MEASUREMENTS = "Measurements & Physical Properties"
SPECIES_ORIGIN = "Species & Origin"
GRADING = "Grading"
CUTTING_STYLE = "Cutting Style"

SECTION_SPECS: dict[ReportKind, tuple[SectionSpec, ...]] = {
    ReportKind.GEMSTONE: (
        SectionSpec(
            BASIC_INFORMATION,
            _specs(
                ("Color", "color"),
                ("Cut", "cut"),
                ("Clarity", "clarity"),
                ("Carat", "carat"),
                ("Authenticity", "authenticity"),
            ),
        ),
        SectionSpec(
            MEASUREMENTS,
            _specs(
                ("Measurements", "measurements"),
                ("Weight", "weight"),
                ("Dimension", "dimension"),
                ("Shape", "shape"),
                ("Transparency", "transparency"),
                ("Optic Character", "optic_character"),
                ("Refractive Index", "refractive_index"),
                ("Specific Gravity", "specific_gravity"),
                ("Magnification", "magnification"),
            ),
        ),
        SectionSpec(
            SPECIES_ORIGIN,
            _specs(
                ("Species", "species"),
                ("Variety", "variety"),
                ("Origin", "origin"),
            ),
        ),
    ),
    ReportKind.DIAMOND: (
        SectionSpec(
            BASIC_INFORMATION,
            _specs(
                ("Carat", "carat"),
                ("Measurements", "measurements"),
                ("Shape", "shape"),
                ("Authenticity", "authenticity"),
            ),
        ),
        SectionSpec(
            GRADING,
            _specs(
                ("Color", "color"),
                ("Clarity", "clarity"),
                ("Cut", "cut"),
                ("Color Grade", "color_grade"),
                ("Clarity Grade", "clarity_grade"),
                ("Cut Grade", "cut_grade"),
                ("Polish", "polish"),
                ("Symmetry", "symmetry"),
                ("Fluorescence", "fluorescence"),
            ),
        ),
    ),
    ReportKind.JEWELLERY: (
        SectionSpec(
            BASIC_INFORMATION,
            _specs(
                ("Color", "color"),
                ("Authenticity", "authenticity"),
                ("Weight", "weight"),
            ),
        ),
        SectionSpec(
            MEASUREMENTS,
            _specs(
                ("Dimension", "dimension"),
                ("Shape", "shape"),
                ("Transparency", "transparency"),
            ),
        ),
        SectionSpec(
            CUTTING_STYLE,
            _specs(
                ("Cutting Style (Crown)", "cutting_style_crown"),
                ("Cutting Style (Pavilion)", "cutting_style_pavilion"),
            ),
        ),
    ),
}

FIELD_KEYS: frozenset[str] = frozenset(
    spec.key for sections in SECTION_SPECS.values() for section in sections for spec in section.fields
)


def _present(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_sections(kind: ReportKind, fields: Mapping[str, object]) -> list[Section]:
    """Return the sections of *kind* that have at least one non-empty field.

    Field and section order always follow ``SECTION_SPECS[kind]``.
    """
    sections: list[Section] = []
    for spec in SECTION_SPECS[kind]:
        resolved: list[tuple[str, str]] = []
        for field_spec in spec.fields:
            value = _present(fields.get(field_spec.key))
            if value is not None:
                resolved.append((field_spec.label, value))
        if resolved:
            sections.append(Section(spec.title, tuple(resolved)))
    return sections
