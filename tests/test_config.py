import logging
from pathlib import Path

import pytest

from cssforge.config import EngineOptions, load_config, validate_options
from cssforge.exceptions import ConfigError


def test_missing_config_returns_empty(tmp_path: Path) -> None:
    assert load_config(tmp_path / "missing.py") == {}


def test_default_path_is_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "cssforge.config.py").write_text('NONCE = "abc"\n')
    monkeypatch.chdir(tmp_path)
    assert load_config() == {"nonce": "abc"}


def test_uppercase_names_are_mapped(tmp_path: Path) -> None:
    config = tmp_path / "cssforge.config.py"
    config.write_text(
        'KEY = "ui"\n'
        "SOURCE_MAPS = False\n"
        "PLUGINS = [lambda rule, source_map: None]\n"
        'UNRELATED = "ignored"\n'
        'key = "lowercase is ignored"\n'
    )
    options = load_config(config)
    assert options["key"] == "ui"
    assert options["source_maps"] is False
    assert len(options["plugins"]) == 1
    assert set(options) == {"key", "source_maps", "plugins"}


def test_broken_config_logs_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config = tmp_path / "cssforge.config.py"
    config.write_text("raise RuntimeError('boom')\n")
    with caplog.at_level(logging.WARNING, logger="cssforge.config"):
        assert load_config(config) == {}
    assert "boom" in caplog.text


def test_validate_options_defaults() -> None:
    options = validate_options({})
    assert options == EngineOptions()
    assert options.key == "css"
    assert options.source_maps is True
    assert options.plugins == []


def test_validate_options_reports_fields() -> None:
    with pytest.raises(ConfigError) as excinfo:
        validate_options({"key": "has space", "plugins": ["not callable"]})
    assert "key" in excinfo.value.errors
    assert any(name.startswith("plugins") for name in excinfo.value.errors)
