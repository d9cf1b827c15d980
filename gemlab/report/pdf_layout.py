"""Page geometry and aspect-ratio helpers for the report layout.

All values are PDF points with the origin at the bottom-left corner.
"""

from __future__ import annotations

from dataclasses import dataclass

PAGE_W = 595.28
PAGE_H = 841.89
PAGE_SIZE = (PAGE_W, PAGE_H)

LEFT_MARGIN = 50.0
RIGHT_RESERVE = 60.0
CONTENT_W = PAGE_W - LEFT_MARGIN - RIGHT_RESERVE
BOTTOM_MARGIN = 100.0

# Content starts below the info box on page 1 and near the top elsewhere.
FIRST_PAGE_CONTENT_TOP = PAGE_H - 280
CONTINUATION_TOP = PAGE_H - 80

LINE_HEIGHT = 14.0
HEADER_GAP = 30.0
HEADER_AFTER = 15.0
HEADER_HEIGHT = HEADER_GAP + HEADER_AFTER
LABEL_GAP = 6.0


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    w: float
    h: float

    def inset(self, amount: float) -> Box:
        return Box(self.x + amount, self.y + amount, self.w - 2 * amount, self.h - 2 * amount)


# First-page header block.
LOGO_BOX = Box((PAGE_W - 160) / 2, PAGE_H - 100, 160, 60)
TITLE_Y = PAGE_H - 120
RULE_Y = PAGE_H - 130
RULE_INSET = 30.0
INFO_BOX = Box(30, PAGE_H - 240, PAGE_W - 60, 80)
INFO_TEXT_X = 45.0
INFO_TEXT_TOP = PAGE_H - 180
INFO_LINE_STEP = 20.0
PHOTO_BOX = Box(PAGE_W - 180, PAGE_H - 420, 140, 140)
PHOTO_INSET = 2.0

# Decoration band (every page).
BORDER_BOX = Box(20, 20, PAGE_W - 40, PAGE_H - 40)
WATERMARK_BOX = Box((PAGE_W - 350) / 2, (PAGE_H - 350) / 2, 350, 350)
IDENTIFIER_BOX = Box(40, 30, 60, 60)
SIGNER_RIGHT_X = PAGE_W - 60
SIGNATURE_BOX = Box(SIGNER_RIGHT_X - 120, 74, 120, 24)
SIGNER_NAME_Y = 60.0
SIGNER_TITLE_Y = 44.0
ADDRESS_YS = (86.0, 77.0)
DISCLAIMER_GAP = 10.0
DISCLAIMER_W = 2 * (SIGNATURE_BOX.x - DISCLAIMER_GAP - PAGE_W / 2)
DISCLAIMER_TOP = 68.0
DISCLAIMER_LEADING = 7.0
DISCLAIMER_MAX_LINES = 5
PAGE_NUMBER_Y = 28.0


def fit_rect_preserve_aspect(
    src_w: float,
    src_h: float,
    box_x: float,
    box_y: float,
    box_w: float,
    box_h: float,
) -> tuple[float, float, float, float]:
    """Return (x, y, w, h) scaled by ``min(box_w/src_w, box_h/src_h)`` and centered.

    Images smaller than the box are scaled up to fill it.
    """
    if src_w <= 0 or src_h <= 0:
        return box_x, box_y, box_w, box_h
    scale = min(box_w / src_w, box_h / src_h)
    w = src_w * scale
    h = src_h * scale
    return box_x + (box_w - w) / 2, box_y + (box_h - h) / 2, w, h


def assert_aspect_preserved(
    src_w: float,
    src_h: float,
    drawn_w: float,
    drawn_h: float,
    tolerance: float = 0.03,
) -> None:
    """Raise if aspect ratio deviates more than *tolerance* (3 %)."""
    if src_w <= 0 or src_h <= 0 or drawn_w <= 0 or drawn_h <= 0:
        raise AssertionError("Invalid dimensions for aspect ratio check")
    src_ratio = src_w / src_h
    drawn_ratio = drawn_w / drawn_h
    delta = abs(drawn_ratio - src_ratio) / src_ratio
    if delta > tolerance:
        raise AssertionError(
            f"Image aspect ratio distorted. src={src_ratio:.4f}, "
            f"drawn={drawn_ratio:.4f}, delta={delta:.2%}"
        )
