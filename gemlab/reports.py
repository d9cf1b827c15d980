"""Report generation as a step after test results are saved.

A failed report never undoes the saved results: each request ends in a
``ReportOutcome`` that records whether the PDF exists and why not.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .report import ReportGenerationError, ReportRequest, ReportSettings, build_report_pdf
from .report_store import ReportStore
from .worker_pool import WorkerPool

LOGGER = logging.getLogger(__name__)

MSG_GENERATED = "Test results saved and report generated successfully"
MSG_FAILED = "Test results saved but report generation failed"


@dataclass(frozen=True)
class ReportOutcome:
    report_generated: bool
    report_path: Path | None = None
    page_count: int = 0
    message: str = MSG_GENERATED
    error: str | None = None


def generate_and_store(
    request: ReportRequest,
    store: ReportStore,
    settings: ReportSettings | None = None,
) -> ReportOutcome:
    identifier = request.header.identifier
    try:
        result = build_report_pdf(request, settings)
        path = store.save(request.kind, identifier, result.pdf)
    except (ReportGenerationError, OSError) as exc:
        LOGGER.warning("Report for %s not generated: %s", identifier or "<unnumbered>", exc)
        return ReportOutcome(report_generated=False, message=MSG_FAILED, error=str(exc))
    return ReportOutcome(
        report_generated=True,
        report_path=path,
        page_count=result.page_count,
        message=MSG_GENERATED,
    )


def generate_batch(
    requests: Sequence[ReportRequest],
    store: ReportStore,
    settings: ReportSettings | None = None,
    pool: WorkerPool | None = None,
) -> list[ReportOutcome]:
    """One outcome per request, in input order."""
    items = list(requests)
    if not items:
        return []

    def _one(request: ReportRequest) -> ReportOutcome:
        return generate_and_store(request, store, settings)

    own = pool is None
    if own:
        pool = WorkerPool(thread_name_prefix="gemlab-reports")
    try:
        outcomes = pool.map_ordered(_one, items)
        LOGGER.info(
            "Generated %d of %d report(s); pool %s",
            sum(1 for outcome in outcomes if outcome.report_generated),
            len(items),
            pool.stats(),
        )
    finally:
        if own:
            pool.shutdown()
    return outcomes
