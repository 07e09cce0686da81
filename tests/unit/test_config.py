"""Unit tests for converter configuration loading."""

from pathlib import Path

import pytest

from vitae.utils.config import DEFAULT_CONFIG_PATH, load_converter_config


@pytest.mark.unit
def test_defaults():
    config = load_converter_config(DEFAULT_CONFIG_PATH)

    assert config["paths"]["latex_dir"] == "latex"
    assert config["paths"]["html_path_prefix"] == "converted-docs"
    assert config["footer"]["license_name"] == "MIT License"
    assert config["site"]["page_title"] == "Resume"


@pytest.mark.unit
def test_drive_link_resolved_from_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_DRIVE_RESUME_LINK", "https://drive.google.com/file/d/abc123/view")
    config = load_converter_config(DEFAULT_CONFIG_PATH)

    assert config["site"]["drive_link"] == "https://drive.google.com/file/d/abc123/view"


@pytest.mark.unit
def test_partial_override_inherits_defaults(tmp_path):
    override = tmp_path / "override.yaml"
    override.write_text("paths:\n  latex_dir: sources\nsite:\n  page_title: CV\n")
    config = load_converter_config(override)

    assert config["paths"]["latex_dir"] == "sources"
    assert config["paths"]["output_dir"] == "public/converted-docs"
    assert config["site"]["page_title"] == "CV"


@pytest.mark.unit
def test_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_converter_config(tmp_path / "missing.yaml")
