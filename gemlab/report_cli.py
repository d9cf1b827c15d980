from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .assets import AssetRefs, LocalAssetProvider, provider_from_config, resolve_assets
from .config import AppConfig, load_config
from .report import ReportGenerationError, ReportRequest, build_report_pdf
from .report_store import ReportStore
from .reports import generate_batch


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate gem lab PDF reports from test payloads")
    parser.add_argument("inputs", nargs="+", type=Path, help="Test-result payload files (.json)")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output PDF path (single input only; default: configured reports directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.yaml (default: config.yaml in the project root)",
    )
    parser.add_argument(
        "--assets-root",
        type=Path,
        default=None,
        help="Read image references from this directory instead of the configured source",
    )
    return parser.parse_args(argv)


def _read_payload(path: Path) -> dict[str, Any]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return payload


def _build_request(
    payload: dict[str, Any], cfg: AppConfig, assets_root: Path | None
) -> ReportRequest:
    provider = LocalAssetProvider(assets_root) if assets_root else provider_from_config(cfg.assets)
    refs = AssetRefs(
        subject_image=payload.get("uploaded_image") or payload.get("uploadedImage"),
        logo=cfg.assets.logo or None,
        identifier_image=payload.get("qr_code_path") or payload.get("qrCodePath"),
        signature=cfg.assets.signature or None,
    )
    return ReportRequest.from_payload(payload, resolve_assets(provider, refs))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.output is not None and len(args.inputs) > 1:
        print("Error: --output accepts a single input file", file=sys.stderr)
        return 1
    try:
        cfg = load_config(args.config)
    except (ValueError, OSError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1
    logging.basicConfig(level=cfg.logging.level, format="%(levelname)s: %(message)s")

    requests: list[ReportRequest] = []
    for path in args.inputs:
        if not path.exists():
            print(f"Error: input file not found: {path}", file=sys.stderr)
            return 1
        try:
            payload = _read_payload(path)
        except json.JSONDecodeError as exc:
            print(f"Error: input file contains invalid JSON: {exc}", file=sys.stderr)
            return 1
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        try:
            requests.append(_build_request(payload, cfg, args.assets_root))
        except ReportGenerationError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        except ValueError as exc:
            print(f"Error: {path}: {exc}", file=sys.stderr)
            return 1

    settings = cfg.report_settings()
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        try:
            result = build_report_pdf(requests[0], settings)
        except ReportGenerationError as exc:
            print(f"Error: PDF generation failed: {exc}", file=sys.stderr)
            return 1
        args.output.write_bytes(result.pdf)
        print(f"wrote report: {args.output} ({result.page_count} page(s))")
        return 0

    outcomes = generate_batch(requests, ReportStore(cfg.storage.reports_dir), settings)
    code = 0
    for path, outcome in zip(args.inputs, outcomes, strict=True):
        if outcome.report_generated:
            print(f"wrote report: {outcome.report_path} ({outcome.page_count} page(s))")
        else:
            print(f"Error: {path}: {outcome.message}: {outcome.error}", file=sys.stderr)
            code = 1
    return code


if __name__ == "__main__":
    raise SystemExit(main())
