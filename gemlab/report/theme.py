from __future__ import annotations

# Print palette for lab reports: black frames, dark-blue section headings.
REPORT_COLORS = {
    "ink": "#000000",
    "border": "#000000",
    "heading": "#0000b3",
    "label": "#1a1a1a",
    "value": "#333333",
    "text_muted": "#4d4d4d",
    "footer": "#4d4d4d",
}

FONT = "Helvetica"
FONT_B = "Helvetica-Bold"

# Font sizes (points).
FS_TITLE = 16
FS_INFO = 12
FS_HEADING = 13
FS_BODY = 11
FS_SIGNER = 12
FS_SIGNER_TITLE = 10
FS_PAGE_NUMBER = 10
FS_ADDRESS = 8
FS_DISCLAIMER = 6

WATERMARK_OPACITY = 0.06
