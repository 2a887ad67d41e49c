import logging

import pytest
from pydantic import ValidationError

from seriescope.adapters.config.settings_loader import load_settings
from seriescope.adapters.metrics.recorders import LoggingMetricsRecorder
from seriescope.core.domain.settings import EngineSettings


def test_engine_settings_defaults():
    settings = EngineSettings()
    assert settings.forecast_min_points == 10
    assert settings.decomposition_min_points == 24
    assert settings.max_horizon == 100
    assert settings.exponential_smoothing_alpha == 0.3
    assert settings.fixed_confidence_multiplier is None
    assert settings.confidence_multiplier(0.95) == pytest.approx(1.96, abs=1e-3)


def test_fixed_multiplier_override():
    settings = EngineSettings(fixed_confidence_multiplier=1.96)
    assert settings.confidence_multiplier(0.5) == 1.96


def test_settings_validation():
    with pytest.raises(ValidationError):
        EngineSettings(exponential_smoothing_alpha=0.0)


def test_load_settings_from_env(monkeypatch):
    monkeypatch.setenv("SERIESCOPE_MAX_HORIZON", "30")
    monkeypatch.setenv("SERIESCOPE_RANDOM_SEED", "99")

    settings = load_settings(path="non_existent.yaml")

    assert settings.max_horizon == 30
    assert settings.random_seed == 99


def test_load_settings_from_file(tmp_path):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("""
engine:
  isolation_trees: 25
  fixed_confidence_multiplier: 1.96
    """)

    settings = load_settings(path=str(config_file))

    assert settings.isolation_trees == 25
    assert settings.fixed_confidence_multiplier == 1.96
    # Defaults preserved
    assert settings.forecast_min_points == 10


def test_load_settings_env_overrides_file(tmp_path, monkeypatch):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("significance_level: 0.01")

    monkeypatch.setenv("SERIESCOPE_SIGNIFICANCE_LEVEL", "0.1")

    settings = load_settings(path=str(config_file))

    # Env var should hold precedence
    assert settings.significance_level == 0.1


def test_load_settings_env_clears_optional(tmp_path, monkeypatch):
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("fixed_confidence_multiplier: 1.96")

    monkeypatch.setenv("SERIESCOPE_FIXED_CONFIDENCE_MULTIPLIER", "none")

    assert load_settings(path=str(config_file)).fixed_confidence_multiplier is None


def test_load_settings_corrupt_file(tmp_path):
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("engine: [unclosed")

    with pytest.raises(RuntimeError, match="Failed to load configuration"):
        load_settings(path=str(config_file))


def test_logging_recorder_writes_metric(caplog):
    with caplog.at_level(logging.DEBUG, logger="seriescope.adapters.metrics.recorders"):
        LoggingMetricsRecorder().record_metric("trend_analysis", 0.25)

    assert "trend_analysis=0.250000" in caplog.text


def test_load_settings_rejects_non_mapping(tmp_path):
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- isolation_trees\n- 25\n")

    with pytest.raises(RuntimeError, match="expected a mapping"):
        load_settings(path=str(config_file))
