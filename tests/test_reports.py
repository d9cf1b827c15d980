"""Tests for report storage and generate-after-save outcomes."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from conftest import make_request, numbered_notes

from gemlab.report.field_specs import ReportKind
from gemlab.report_store import ReportStore, report_filename
from gemlab.reports import MSG_FAILED, MSG_GENERATED, generate_and_store, generate_batch
from gemlab.worker_pool import WorkerPool

WHEN = datetime.fromtimestamp(1704153600, tz=timezone.utc)

# ---------------------------------------------------------------------------
# report_filename / ReportStore
# ---------------------------------------------------------------------------


def test_report_filename_uses_kind_identifier_and_epoch_millis() -> None:
    assert report_filename("diamond", "GL-118", WHEN) == "diamond-report-GL-118-1704153600000.pdf"


@pytest.mark.parametrize(
    "identifier, expected",
    [
        ("GL/24 001", "GL_24_001"),
        ("../../etc", "etc"),
        ("", "unnumbered"),
    ],
)
def test_report_filename_sanitises_identifier(identifier: str, expected: str) -> None:
    name = report_filename(ReportKind.GEMSTONE, identifier, WHEN)
    assert name == f"gemstone-report-{expected}-1704153600000.pdf"


def test_store_saves_pdf(tmp_path: Path) -> None:
    store = ReportStore(tmp_path / "reports")
    path = store.save("jewellery", "J-1", b"%PDF-1.4 test", WHEN)
    assert path == tmp_path / "reports" / "jewellery-report-J-1-1704153600000.pdf"
    assert path.read_bytes() == b"%PDF-1.4 test"
    assert [p.name for p in path.parent.iterdir()] == [path.name]


def test_store_propagates_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "reports"
    blocker.write_text("not a directory")
    with pytest.raises(OSError):
        ReportStore(blocker).save("gemstone", "X", b"%PDF")


# ---------------------------------------------------------------------------
# generate_and_store / generate_batch
# ---------------------------------------------------------------------------


def test_generate_and_store_success(tmp_path: Path) -> None:
    outcome = generate_and_store(make_request(notes=numbered_notes(40)), ReportStore(tmp_path))
    assert outcome.report_generated is True
    assert outcome.message == MSG_GENERATED
    assert outcome.page_count == 2
    assert outcome.report_path is not None
    assert outcome.report_path.read_bytes().startswith(b"%PDF")
    assert outcome.report_path.name.startswith("gemstone-report-GL-0001-")


def test_generation_failure_is_reported_not_raised(tmp_path: Path) -> None:
    request = make_request(subject_image=b"BM not an image")
    outcome = generate_and_store(request, ReportStore(tmp_path))
    assert outcome.report_generated is False
    assert outcome.message == MSG_FAILED
    assert outcome.report_path is None
    assert "Unsupported image format" in outcome.error
    assert list(tmp_path.iterdir()) == []


def test_storage_failure_is_reported_not_raised(tmp_path: Path) -> None:
    blocker = tmp_path / "reports"
    blocker.write_text("")
    outcome = generate_and_store(make_request(), ReportStore(blocker))
    assert outcome.report_generated is False
    assert outcome.message == MSG_FAILED


def test_generate_batch_keeps_input_order(tmp_path: Path) -> None:
    requests = [
        make_request(identifier="A", notes=numbered_notes(40)),
        make_request(identifier="B", logo_image=b"GIF89a"),
        make_request("diamond", identifier="C"),
    ]
    with WorkerPool(max_workers=3) as pool:
        outcomes = generate_batch(requests, ReportStore(tmp_path), pool=pool)
    assert [o.report_generated for o in outcomes] == [True, False, True]
    assert outcomes[0].page_count == 2
    assert outcomes[2].report_path.name.startswith("diamond-report-C-")


def test_generate_batch_empty(tmp_path: Path) -> None:
    assert generate_batch([], ReportStore(tmp_path)) == []


def test_generate_batch_logs_summary_with_pool_stats(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    requests = [make_request(identifier="A"), make_request(identifier="B", logo_image=b"GIF89a")]
    with caplog.at_level("INFO", logger="gemlab.reports"):
        generate_batch(requests, ReportStore(tmp_path))
    (summary,) = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Generated")]
    assert summary.startswith("Generated 1 of 2 report(s)")
    assert "'max_workers': 4" in summary
    assert "'total_tasks': 2" in summary
