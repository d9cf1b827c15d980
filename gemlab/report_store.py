"""Filesystem store for finished report PDFs.

Writes are atomic (write-to-temp + ``os.replace``) so a crash mid-write
never leaves a truncated PDF under its final name.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import time
from datetime import datetime
from pathlib import Path

from .report.field_specs import ReportKind

LOGGER = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_identifier(identifier: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", identifier.strip()).strip("._")
    return cleaned or "unnumbered"


def report_filename(
    kind: ReportKind | str,
    identifier: str,
    when: datetime | None = None,
) -> str:
    """``{kind}-report-{identifier}-{epoch_millis}.pdf``."""
    kind = ReportKind.parse(kind)
    millis = int((when.timestamp() if when is not None else time.time()) * 1000)
    return f"{kind.value}-report-{_safe_identifier(identifier)}-{millis}.pdf"


class ReportStore:
    def __init__(self, reports_dir: str | Path) -> None:
        self._dir = Path(reports_dir)

    @property
    def reports_dir(self) -> Path:
        return self._dir

    def save(
        self,
        kind: ReportKind | str,
        identifier: str,
        pdf: bytes,
        when: datetime | None = None,
    ) -> Path:
        """Persist *pdf* and return its final path.  ``OSError`` propagates."""
        dest = self._dir / report_filename(kind, identifier, when)
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self._dir), prefix=".report_", suffix=".tmp")
        try:
            try:
                os.write(fd, pdf)
                os.fsync(fd)
            finally:
                os.close(fd)
            os.replace(tmp, dest)
        except OSError:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
        LOGGER.info("Stored report %s (%d bytes)", dest, len(pdf))
        return dest
