"""Failure types raised while composing a report document.

Every error aborts generation of the whole document; callers never receive
a partial PDF.
"""

from __future__ import annotations


class ReportGenerationError(RuntimeError):
    """Base class; ``str(exc)`` is the human-readable reason."""


class UnsupportedImageFormat(ReportGenerationError):
    pass


class AssetFetchFailure(ReportGenerationError):
    def __init__(self, ref: str, reason: str) -> None:
        super().__init__(f"Could not fetch asset {ref!r}: {reason}")
        self.ref = ref
        self.reason = reason


class SerializationFailure(ReportGenerationError):
    pass
