from pathlib import Path

import pytest

from core.config import Settings, load_config, load_settings
from core.registry import load_enabled_modules

ROOT = Path(__file__).resolve().parent.parent


def test_shipped_config_loads():
    cfg = load_config(str(ROOT / "config.toml"))
    settings = load_settings(cfg)
    assert settings.page_title == "Heart Failure Risk Predictor"
    assert settings.simulated_delay_seconds == 2.0
    assert settings.noise is True
    assert settings.seed is None
    assert [m.id for m in load_enabled_modules(cfg)] == ["heart_failure"]


def test_settings_defaults():
    assert load_settings({}) == Settings()


def test_settings_overrides(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '[app]\nlog_level = "debug"\n'
        '[scoring]\nsimulated_delay_seconds = -1\nnoise = false\nseed = 7\n'
    )
    settings = load_settings(load_config(str(path)))
    assert settings.log_level == "DEBUG"
    assert settings.simulated_delay_seconds == 0.0
    assert settings.noise is False
    assert settings.seed == 7


def test_missing_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.toml"))


def test_disabled_modules_are_skipped():
    cfg = {"modules": {"heart_failure": {"enabled": False}}}
    assert load_enabled_modules(cfg) == []
