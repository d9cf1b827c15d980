from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .report.decorator import disclaimer_lines
from .report.errors import ReportGenerationError
from .report.report_data import DEFAULT_ADDRESS_LINES, DEFAULT_DISCLAIMER, ReportSettings

PROJECT_DIR = Path(__file__).resolve().parents[1]
LOGGER = logging.getLogger(__name__)

VALID_ASSET_SOURCES = {"local", "http"}
VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

DEFAULT_CONFIG: dict[str, Any] = {
    "report": {
        "signer_name": "Preeti Jhalani",
        "signer_title": "FGA",
        "address_lines": list(DEFAULT_ADDRESS_LINES),
        "disclaimer": DEFAULT_DISCLAIMER,
        "date_format": "%d/%m/%Y",
        "watermark_opacity": 0.06,
    },
    "assets": {
        "source": "local",
        "root": "public",
        "base_url": "",
        "timeout_s": 30,
        "logo": "logo.jpeg",
        "signature": "",
    },
    "storage": {
        "reports_dir": "data/reports",
    },
    "logging": {
        "level": "INFO",
    },
}


def documented_default_config() -> dict[str, Any]:
    return deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _resolve_config_path(path_text: str, config_path: Path) -> Path:
    path = Path(path_text)
    if path.is_absolute():
        return path
    return (config_path.parent / path).resolve()


@dataclass(slots=True)
class ReportConfig:
    signer_name: str
    signer_title: str
    address_lines: tuple[str, str]
    disclaimer: str
    date_format: str
    watermark_opacity: float

    def __post_init__(self) -> None:
        if len(self.address_lines) != 2:
            raise ValueError(
                f"report.address_lines must contain exactly 2 lines, got {len(self.address_lines)}"
            )
        if not 0.0 < self.watermark_opacity <= 1.0:
            raise ValueError(
                f"report.watermark_opacity must be in (0, 1], got {self.watermark_opacity!r}"
            )
        try:
            disclaimer_lines(self.disclaimer)
        except ReportGenerationError as exc:
            raise ValueError(f"report.disclaimer is too long: {exc}") from exc


@dataclass(slots=True)
class AssetsConfig:
    source: str
    root: Path
    base_url: str
    timeout_s: float
    logo: str
    signature: str

    def __post_init__(self) -> None:
        if self.source not in VALID_ASSET_SOURCES:
            valid = ", ".join(sorted(VALID_ASSET_SOURCES))
            raise ValueError(f"assets.source must be one of {valid}, got {self.source!r}")
        if self.source == "http" and not self.base_url.strip():
            raise ValueError("assets.base_url must be configured when assets.source is http.")
        if self.timeout_s <= 0:
            raise ValueError(f"assets.timeout_s must be positive, got {self.timeout_s!r}")


@dataclass(slots=True)
class StorageConfig:
    reports_dir: Path


@dataclass(slots=True)
class LoggingConfig:
    level: str


@dataclass(slots=True)
class AppConfig:
    report: ReportConfig
    assets: AssetsConfig
    storage: StorageConfig
    logging: LoggingConfig
    config_path: Path

    def report_settings(self) -> ReportSettings:
        return ReportSettings(
            signer_name=self.report.signer_name,
            signer_title=self.report.signer_title,
            address_lines=self.report.address_lines,
            disclaimer=self.report.disclaimer,
            date_format=self.report.date_format,
            watermark_opacity=self.report.watermark_opacity,
        )


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a YAML object at the top level.")
        return data


def load_config(config_path: Path | None = None) -> AppConfig:
    path = config_path or (PROJECT_DIR / "config.yaml")
    path = path.resolve()
    override = _read_config_file(path)
    merged = _deep_merge(DEFAULT_CONFIG, override)

    report_cfg = merged["report"]
    address_raw = report_cfg.get("address_lines")
    if not isinstance(address_raw, list) or not all(isinstance(v, str) for v in address_raw):
        raise ValueError("report.address_lines must be a list of strings.")

    level = str(merged["logging"].get("level", "INFO")).upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"logging.level must be one of {sorted(VALID_LOG_LEVELS)}, got {level!r}")

    assets_cfg = merged["assets"]
    app_config = AppConfig(
        report=ReportConfig(
            signer_name=str(report_cfg["signer_name"]),
            signer_title=str(report_cfg["signer_title"]),
            address_lines=tuple(address_raw),
            disclaimer=str(report_cfg.get("disclaimer") or ""),
            date_format=str(report_cfg["date_format"]),
            watermark_opacity=float(report_cfg["watermark_opacity"]),
        ),
        assets=AssetsConfig(
            source=str(assets_cfg["source"]).strip().lower(),
            root=_resolve_config_path(str(assets_cfg["root"]), path),
            base_url=str(assets_cfg.get("base_url") or ""),
            timeout_s=float(assets_cfg["timeout_s"]),
            logo=str(assets_cfg.get("logo") or ""),
            signature=str(assets_cfg.get("signature") or ""),
        ),
        storage=StorageConfig(
            reports_dir=_resolve_config_path(str(merged["storage"]["reports_dir"]), path),
        ),
        logging=LoggingConfig(level=level),
        config_path=path,
    )
    LOGGER.info(
        "Loaded config=%s assets=%s reports_dir=%s",
        app_config.config_path,
        app_config.assets.source,
        app_config.storage.reports_dir,
    )
    return app_config
