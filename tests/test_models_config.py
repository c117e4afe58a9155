"""
Tests for health models and configuration.
"""

import logging

import pytest
from pydantic import ValidationError

import healthgate.config as config_module
from healthgate import LOG_FORMAT, configure_logging
from healthgate.config import AppConfig, ClientConfig, LimiterConfig, get_config, reload_config
from healthgate.health.models import HealthStatus, Metric, new_metric, new_report


class TestModels:
    """Metric and report builders."""

    def test_new_metric(self):
        metric = new_metric("latency", HealthStatus.PENDING, 2.5)

        assert metric.name == "latency"
        assert metric.value.status == HealthStatus.PENDING
        assert metric.value.score == 2.5
        assert metric.summary() == "latency=pending(2.5)"

    def test_metric_requires_name(self):
        with pytest.raises(ValidationError):
            Metric(name="", value={"status": "normal", "score": 1.0})

    def test_new_report_keys_metrics_by_name(self):
        report = new_report(
            "agent-1",
            "db-1",
            new_metric("latency", HealthStatus.NORMAL, 1.0),
            new_metric("disk", HealthStatus.ABNORMAL, 0.0),
        )

        assert set(report.observation.metrics) == {"latency", "disk"}
        assert report.observation.ts.tzinfo is not None


class TestConfig:
    """Environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("HEALTHGATE_LIMITER_WINDOW_SECONDS", raising=False)

        config = LimiterConfig()

        assert config.window_seconds == 30
        assert config.count_threshold == 10

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HEALTHGATE_LIMITER_WINDOW_SECONDS", "45")
        monkeypatch.setenv("HEALTHGATE_CLIENT_SERVER_URL", "http://health.test:7000")

        assert LimiterConfig().window_seconds == 45
        assert ClientConfig().server_url == "http://health.test:7000"

    def test_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            LimiterConfig(window_seconds=0)

    def test_log_level_validated(self):
        assert AppConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            AppConfig(log_level="chatty")

    def test_reload_config(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)
        first = get_config()
        monkeypatch.setenv("HEALTHGATE_LIMITER_WINDOW_SECONDS", "12")

        reloaded = reload_config()

        assert reloaded is not first
        assert reloaded.limiter.window_seconds == 12


class TestLogging:
    """Package logging setup."""

    def test_configure_logging(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        configure_logging("debug")

        assert calls == [{"level": logging.DEBUG, "format": LOG_FORMAT}]

    def test_configure_logging_defaults_to_configured_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        monkeypatch.setattr(config_module, "_config", None)
        monkeypatch.setenv("HEALTHGATE_LOG_LEVEL", "warning")

        configure_logging()

        assert calls == [{"level": logging.WARNING, "format": LOG_FORMAT}]
