import logging
from datetime import datetime, timedelta

import pytest

from utils.monitoring import DEFAULT_CYCLE_THRESHOLDS, AdjustmentMonitor

# --- Test Fixtures --- #


@pytest.fixture
def monitor() -> AdjustmentMonitor:
    """Provides a monitor with a short drift window."""
    return AdjustmentMonitor(
        name="test-cycle",
        metric_thresholds={"mean_demand": (0.2, 1.0)},
        drift_window=3,
        drift_threshold_percent=15.0,
    )


def feed(monitor, metric, values):
    start = datetime(2026, 10, 18)
    for i, value in enumerate(values):
        monitor.record_metrics({metric: value}, start + timedelta(hours=4 * i))


# --- Test Initialization --- #


def test_monitor_defaults():
    monitor = AdjustmentMonitor()
    assert monitor.name == "price-adjustment"
    assert monitor.metric_thresholds == DEFAULT_CYCLE_THRESHOLDS
    assert monitor.metric_thresholds is not DEFAULT_CYCLE_THRESHOLDS
    assert monitor.metrics_history == {}
    assert monitor.alerts == []


# --- Test record_metrics --- #


def test_record_metrics_stores_history(monitor):
    ts = datetime(2026, 10, 18, 4)
    monitor.record_metrics({"mean_demand": 0.6, "services_adjusted": 7}, ts)
    assert monitor.metrics_history["mean_demand"] == [(ts, 0.6)]
    assert monitor.latest("services_adjusted") == 7
    assert monitor.latest("unknown") is None


def test_record_metrics_skips_non_numeric(monitor, caplog):
    with caplog.at_level(logging.WARNING):
        monitor.record_metrics({"mean_demand": "high"})
    assert "mean_demand" not in monitor.metrics_history
    assert "non-numeric" in caplog.text


def test_threshold_breach_triggers_alert(monitor, caplog):
    with caplog.at_level(logging.WARNING):
        monitor.record_metrics({"mean_demand": 0.05})
    assert len(monitor.alerts) == 1
    assert "mean_demand" in monitor.alerts[0]
    assert "ALERT [test-cycle]" in caplog.text


def test_in_range_value_does_not_alert(monitor):
    monitor.record_metrics({"mean_demand": 0.5})
    assert monitor.alerts == []


# --- Test detect_drift --- #


def test_no_drift_without_enough_history(monitor):
    feed(monitor, "mean_demand", [0.5, 0.9, 0.9])
    assert monitor.detect_drift("mean_demand") is False


def test_detects_drift_between_windows(monitor):
    feed(monitor, "mean_demand", [0.5, 0.5, 0.5, 0.8, 0.8, 0.8])
    assert monitor.detect_drift("mean_demand") is True


def test_stable_metric_has_no_drift(monitor):
    feed(monitor, "mean_demand", [0.5, 0.52, 0.5, 0.51, 0.5, 0.52])
    assert monitor.detect_drift("mean_demand") is False


def test_drift_from_zero_baseline(monitor):
    feed(monitor, "services_adjusted", [0, 0, 0, 3, 3, 3])
    assert monitor.detect_drift("services_adjusted") is True
