from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from gemlab.config import PROJECT_DIR, documented_default_config, load_config
from gemlab.report.report_data import ReportSettings


def _write_config(path: Path, payload: object) -> None:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "absent.yaml")
    assert cfg.report.signer_name == "Preeti Jhalani"
    assert cfg.report.signer_title == "FGA"
    assert cfg.report.date_format == "%d/%m/%Y"
    assert cfg.assets.source == "local"
    assert cfg.assets.timeout_s == 30
    assert cfg.assets.logo == "logo.jpeg"
    assert cfg.logging.level == "INFO"


def test_relative_paths_resolve_against_config_dir(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    _write_config(config_path, {"assets": {"root": "static"}, "storage": {"reports_dir": "out"}})
    cfg = load_config(config_path)
    assert cfg.assets.root == (tmp_path / "static").resolve()
    assert cfg.storage.reports_dir == (tmp_path / "out").resolve()
    assert cfg.config_path == config_path.resolve()


def test_partial_override_keeps_other_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    _write_config(config_path, {"report": {"signer_name": "A. Rao"}})
    cfg = load_config(config_path)
    assert cfg.report.signer_name == "A. Rao"
    assert cfg.report.signer_title == "FGA"


def test_report_settings_mirror_report_section(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    _write_config(
        config_path,
        {
            "report": {
                "address_lines": ["One", "Two"],
                "disclaimer": "Short",
                "date_format": "%Y-%m-%d",
                "watermark_opacity": 0.1,
            }
        },
    )
    settings = load_config(config_path).report_settings()
    assert settings == ReportSettings(
        signer_name="Preeti Jhalani",
        signer_title="FGA",
        address_lines=("One", "Two"),
        disclaimer="Short",
        date_format="%Y-%m-%d",
        watermark_opacity=0.1,
    )


def test_logging_level_is_normalised(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    _write_config(config_path, {"logging": {"level": "debug"}})
    assert load_config(config_path).logging.level == "DEBUG"


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"assets": {"source": "s3"}}, "assets.source must be one of"),
        ({"assets": {"source": "http"}}, "assets.base_url must be configured"),
        ({"assets": {"timeout_s": 0}}, "assets.timeout_s must be positive"),
        ({"report": {"address_lines": ["only one"]}}, "exactly 2 lines"),
        ({"report": {"address_lines": "one line"}}, "must be a list of strings"),
        ({"report": {"watermark_opacity": 1.5}}, "watermark_opacity"),
        ({"report": {"disclaimer": "word " * 400}}, "report.disclaimer is too long"),
        ({"logging": {"level": "LOUD"}}, "logging.level must be one of"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, payload: dict, message: str) -> None:
    config_path = tmp_path / "config.yaml"
    _write_config(config_path, payload)
    with pytest.raises(ValueError, match=message):
        load_config(config_path)


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    _write_config(config_path, ["not", "a", "mapping"])
    with pytest.raises(ValueError, match="YAML object at the top level"):
        load_config(config_path)


def test_example_config_matches_defaults() -> None:
    example = yaml.safe_load((PROJECT_DIR / "config.example.yaml").read_text(encoding="utf-8"))
    defaults = documented_default_config()
    for section, values in example.items():
        for key, value in values.items():
            assert defaults[section][key] == value, f"{section}.{key}"
