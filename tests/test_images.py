from __future__ import annotations

from unittest.mock import patch

import pytest
from conftest import image_bytes

from gemlab.report.errors import ReportGenerationError, UnsupportedImageFormat
from gemlab.report.images import (
    EmbeddedImage,
    detect_image_format,
    fit_image,
    load_image,
    place_image,
)
from gemlab.report.pdf_layout import (
    IDENTIFIER_BOX,
    PHOTO_BOX,
    PHOTO_INSET,
    SIGNATURE_BOX,
    WATERMARK_BOX,
    Box,
    assert_aspect_preserved,
    fit_rect_preserve_aspect,
)

# ---------------------------------------------------------------------------
# Format detection and decoding
# ---------------------------------------------------------------------------


def test_detect_png_and_jpeg(png_bytes: bytes, jpeg_bytes: bytes) -> None:
    assert detect_image_format(png_bytes) == "png"
    assert detect_image_format(jpeg_bytes) == "jpeg"


@pytest.mark.parametrize("data", [b"GIF89a\x01\x00", b"BM\x00\x00", b"x"])
def test_detect_rejects_other_formats(data: bytes) -> None:
    with pytest.raises(UnsupportedImageFormat):
        detect_image_format(data)


def test_unsupported_format_is_a_generation_error() -> None:
    assert issubclass(UnsupportedImageFormat, ReportGenerationError)


@pytest.mark.parametrize("data", [None, b""])
def test_absent_image_loads_as_none(data: bytes | None) -> None:
    assert load_image(data) is None


def test_load_png_reports_natural_size(png_bytes: bytes) -> None:
    image = load_image(png_bytes, name="photo")
    assert isinstance(image, EmbeddedImage)
    assert (image.fmt, image.width, image.height) == ("png", 40, 20)


def test_load_jpeg_reports_natural_size(jpeg_bytes: bytes) -> None:
    image = load_image(jpeg_bytes)
    assert image is not None
    assert (image.fmt, image.width, image.height) == ("jpeg", 30, 60)


@pytest.mark.parametrize("fmt", ["PNG", "JPEG"])
def test_truncated_image_with_valid_magic_is_rejected(fmt: str) -> None:
    data = image_bytes(fmt, (64, 64))[:40]
    with pytest.raises(UnsupportedImageFormat, match="Could not decode"):
        load_image(data, name="photo")


# ---------------------------------------------------------------------------
# Aspect-preserving fit
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "src, expected",
    [
        ((200, 100), (0.0, 25.0, 100.0, 50.0)),
        ((100, 200), (25.0, 0.0, 50.0, 100.0)),
        ((10, 10), (0.0, 0.0, 100.0, 100.0)),
    ],
)
def test_fit_rect_scales_by_min_ratio_and_centers(
    src: tuple[int, int], expected: tuple[float, float, float, float]
) -> None:
    assert fit_rect_preserve_aspect(*src, 0, 0, 100, 100) == pytest.approx(expected)


def test_fit_rect_degenerate_source_returns_box() -> None:
    assert fit_rect_preserve_aspect(0, 10, 5, 6, 7, 8) == (5, 6, 7, 8)


def test_assert_aspect_preserved() -> None:
    assert_aspect_preserved(200, 100, 100, 50)
    with pytest.raises(AssertionError, match="distorted"):
        assert_aspect_preserved(200, 100, 100, 100)


def test_place_image_fits_into_inset_photo_box() -> None:
    image = load_image(image_bytes("PNG", (300, 100)))
    inner = PHOTO_BOX.inset(PHOTO_INSET)
    element = place_image(image, inner)
    assert element is not None
    assert element.w == pytest.approx(inner.w)
    assert element.h == pytest.approx(inner.w / 3)
    assert element.x == pytest.approx(inner.x)
    assert element.y == pytest.approx(inner.y + (inner.h - element.h) / 2)
    assert_aspect_preserved(300, 100, element.w, element.h)


def test_place_image_none_is_none() -> None:
    assert place_image(None, Box(0, 0, 10, 10)) is None


def test_fit_image_returns_box(jpeg_bytes: bytes) -> None:
    image = load_image(jpeg_bytes)
    fitted = fit_image(image, Box(0, 0, 60, 60))
    assert fitted == Box(15.0, 0.0, 30.0, 60.0)


def test_fit_image_rejects_distorted_placement(png_bytes: bytes) -> None:
    image = load_image(png_bytes)
    with patch("gemlab.report.images.fit_rect_preserve_aspect", return_value=(0, 0, 100, 10)):
        with pytest.raises(AssertionError, match="distorted"):
            fit_image(image, Box(0, 0, 100, 100))


@pytest.mark.parametrize("size", [(1, 400), (400, 1), (7, 3)])
def test_extreme_ratios_fit_every_layout_box(size: tuple[int, int]) -> None:
    image = load_image(image_bytes("PNG", size))
    for box in (PHOTO_BOX.inset(PHOTO_INSET), IDENTIFIER_BOX, SIGNATURE_BOX, WATERMARK_BOX):
        element = place_image(image, box)
        assert element is not None
        assert_aspect_preserved(*size, element.w, element.h)
