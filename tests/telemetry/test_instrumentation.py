"""Telemetry instrumentation unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from oneship.engine.errors import OutOfBoundsError
from oneship.engine.instrumented_game import InstrumentedGame
from oneship.engine.ship import Ship
from oneship.telemetry import config as telemetry_config_module
from oneship.telemetry import logger as logger_module
from oneship.telemetry import metrics as metrics_module
from oneship.telemetry import tracer as tracer_module
from oneship.telemetry.config import TelemetryConfig


class DummySpan:
    def __init__(self, names: list[str], span_name: str) -> None:
        self._names = names
        self._names.append(span_name)
        self.attributes: dict[str, object] = {}
        self.exceptions: list[BaseException] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def set_attribute(self, key, value):
        self.attributes[key] = value

    def record_exception(self, exc):
        self.exceptions.append(exc)


class DummyTracer:
    def __init__(self) -> None:
        self.span_names: list[str] = []

    def start_as_current_span(self, name: str):
        return DummySpan(self.span_names, name)


def reset_singletons() -> None:
    tracer_module._TRACER = None
    tracer_module._TRACER_PROVIDER = None
    metrics_module._METER = None
    metrics_module._METER_PROVIDER = None
    metrics_module._INSTRUMENTS = {}
    metrics_module._HISTOGRAMS = {}
    logger_module._LOGGERS.clear()


@pytest.fixture()
def clean_otel_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ONESHIP_ENABLE_TRACING",
        "ONESHIP_ENABLE_METRICS",
        "ONESHIP_ENABLE_LOGGING",
        "OTEL_TRACES_ENABLED",
        "OTEL_METRICS_ENABLED",
        "OTEL_LOGS_ENABLED",
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
        "OTEL_EXPORTER_OTLP_METRICS_ENDPOINT",
        "OTEL_EXPORTER_OTLP_LOGS_ENDPOINT",
        "OTEL_SERVICE_NAME",
        "OTEL_SERVICE_NAMESPACE",
        "OTEL_RESOURCE_ATTRIBUTES",
    ):
        monkeypatch.delenv(name, raising=False)


def test_init_providers_replace_proxies(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()

    provider_instance = MagicMock()
    provider_instance.get_tracer.return_value = MagicMock()
    monkeypatch.setattr(tracer_module, "TracerProvider", MagicMock(return_value=provider_instance))
    monkeypatch.setattr(tracer_module, "OTLPSpanExporter", MagicMock(return_value=MagicMock()))
    monkeypatch.setattr(tracer_module.trace, "set_tracer_provider", MagicMock())
    tracer_module.init_tracing(
        TelemetryConfig(enable_tracing=True, otlp_traces_endpoint="http://example")
    )
    assert tracer_module.get_tracer() is provider_instance.get_tracer.return_value

    meter_provider = MagicMock()
    meter_provider.get_meter.return_value = MagicMock()
    monkeypatch.setattr(metrics_module, "MeterProvider", MagicMock(return_value=meter_provider))
    monkeypatch.setattr(metrics_module, "OTLPMetricExporter", MagicMock(return_value=MagicMock()))
    monkeypatch.setattr(metrics_module, "PeriodicExportingMetricReader", MagicMock())
    monkeypatch.setattr(metrics_module.otel_metrics, "set_meter_provider", MagicMock())
    metrics_module.init_metrics(
        TelemetryConfig(enable_metrics=True, otlp_metrics_endpoint="http://example")
    )
    assert metrics_module.get_meter() is meter_provider.get_meter.return_value

    reset_singletons()


def test_record_game_metric_reuses_counter(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()
    meter = MagicMock()
    monkeypatch.setattr(metrics_module, "_METER", meter)

    metrics_module.record_game_metric("oneship_shots_total", 1, {"result": "hit"})
    metrics_module.record_game_metric("oneship_shots_total", 1)

    meter.create_counter.assert_called_once_with("oneship_shots_total")
    counter = meter.create_counter.return_value
    assert counter.add.call_count == 2
    reset_singletons()


def test_record_game_histogram_records_observations(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()
    meter = MagicMock()
    monkeypatch.setattr(metrics_module, "_METER", meter)

    metrics_module.record_game_histogram("oneship_game_shots_to_win", 4, {"board_size": 5})
    metrics_module.record_game_histogram("oneship_game_shots_to_win", 9, {"board_size": 5})

    meter.create_histogram.assert_called_once_with("oneship_game_shots_to_win")
    meter.create_counter.assert_not_called()
    recorded = [call.args[0] for call in meter.create_histogram.return_value.record.call_args_list]
    assert recorded == [4, 9]
    reset_singletons()


def test_get_logger_is_cached() -> None:
    reset_singletons()
    assert logger_module.get_logger("test") is logger_module.get_logger("test")


def test_init_telemetry_noop(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    monkeypatch.setattr(telemetry_config_module, "init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr(telemetry_config_module, "init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr(telemetry_config_module, "init_logging", lambda cfg: calls.append("lo"))

    telemetry_config_module.init_telemetry(TelemetryConfig())
    assert calls == []


def test_init_telemetry_respects_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    monkeypatch.setattr(telemetry_config_module, "init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr(telemetry_config_module, "init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr(telemetry_config_module, "init_logging", lambda cfg: calls.append("lo"))

    config = TelemetryConfig(enable_tracing=True, enable_logging=True)
    telemetry_config_module.init_telemetry(config)
    assert calls == ["tr", "lo"]


def test_from_env_reads_flags_and_endpoints(
    monkeypatch: pytest.MonkeyPatch, clean_otel_env: None
) -> None:
    monkeypatch.setenv("ONESHIP_ENABLE_LOGGING", "yes")
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317/")
    monkeypatch.setenv("OTEL_RESOURCE_ATTRIBUTES", "deployment=test,bogus")

    config = TelemetryConfig.from_env()

    assert config.enable_logging is True
    assert config.enable_tracing is True
    assert config.otlp_traces_endpoint == "http://collector:4317/v1/traces"
    assert config.otlp_metrics_endpoint == "http://collector:4317/v1/metrics"
    assert config.resource()["deployment"] == "test"
    assert config.resource()["service.name"] == "oneship"


def test_from_env_defaults_disable_everything(clean_otel_env: None) -> None:
    config = TelemetryConfig.from_env()
    assert not (config.enable_tracing or config.enable_metrics or config.enable_logging)


def test_load_telemetry_config_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    telemetry_config_module.load_telemetry_config.cache_clear()
    calls = {"count": 0}

    def fake_from_env(cls, **overrides):
        calls["count"] += 1
        return TelemetryConfig(enable_tracing=True)

    monkeypatch.setattr(
        telemetry_config_module.TelemetryConfig, "from_env", classmethod(fake_from_env)
    )

    first = telemetry_config_module.load_telemetry_config()
    second = telemetry_config_module.load_telemetry_config()
    assert first is second
    assert calls["count"] == 1
    telemetry_config_module.load_telemetry_config.cache_clear()


def test_instrumented_game_emits_spans(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer = DummyTracer()
    metrics_calls: list[tuple[str, float, dict | None]] = []
    logger = MagicMock()

    monkeypatch.setattr("oneship.engine.instrumented_game.get_tracer", lambda *_: tracer)
    monkeypatch.setattr("oneship.engine.instrumented_game.get_logger", lambda *_: logger)
    monkeypatch.setattr(
        "oneship.engine.instrumented_game.record_game_metric",
        lambda name, value, attrs=None: metrics_calls.append((name, value, attrs)),
    )
    histogram_calls: list[tuple[str, float, dict | None]] = []
    monkeypatch.setattr(
        "oneship.engine.instrumented_game.record_game_histogram",
        lambda name, value, attrs=None: histogram_calls.append((name, value, attrs)),
    )

    game = InstrumentedGame(2, Ship.armored(0, 0, 2))
    game.take_shot(1, 1)
    game.take_shot(0, 0)
    assert tracer.span_names == ["oneship.engine.take_shot", "oneship.engine.take_shot"]
    assert "oneship_shots_total" in {name for name, _, _ in metrics_calls}

    tracer.span_names.clear()
    metrics_calls.clear()
    result = game.take_shot(0, 0)
    assert result.destroyed
    assert "oneship.engine.game_complete" in tracer.span_names
    metric_names = {name for name, _, _ in metrics_calls}
    assert "oneship_game_completed_total" in metric_names
    assert ("oneship_game_shots_to_win", 3, {"board_size": 2}) in histogram_calls
    assert "oneship_game_shots_to_win" not in metric_names


def test_instrumented_game_records_rejected_shots(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer = DummyTracer()
    metrics_calls: list[str] = []

    monkeypatch.setattr("oneship.engine.instrumented_game.get_tracer", lambda *_: tracer)
    monkeypatch.setattr("oneship.engine.instrumented_game.get_logger", lambda *_: MagicMock())
    monkeypatch.setattr(
        "oneship.engine.instrumented_game.record_game_metric",
        lambda name, value, attrs=None: metrics_calls.append(name),
    )

    game = InstrumentedGame(2, Ship.basic(0, 0))
    with pytest.raises(OutOfBoundsError):
        game.take_shot(2, 0)
    assert metrics_calls == ["oneship_rejected_shots_total"]
    assert game.shots == 0
