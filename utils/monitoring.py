"""
Utilities for monitoring adjustment cycles and flagging unusual behaviour.
"""

import logging
from collections import defaultdict
from datetime import datetime

import numpy as np  # For drift detection

# Define a logger for this module
logger = logging.getLogger(__name__)

# Bounds that a healthy cycle stays inside
DEFAULT_CYCLE_THRESHOLDS: dict[str, tuple[float, float]] = {
    "mean_demand": (0.2, 1.0),
    "mean_margin_percent": (99.5, 200.5),
}


class AdjustmentMonitor:
    """Records per-cycle metrics, warns on threshold breaches and detects drift."""

    def __init__(
        self,
        name: str = "price-adjustment",
        metric_thresholds: dict[str, tuple[float, float]] | None = None,
        drift_window: int = 6,
        drift_threshold_percent: float = 15.0,
    ):
        """
        Args:
            name: Label used in log messages.
            metric_thresholds: Dict mapping metric names to (min_value, max_value) tuples.
            drift_window: Number of cycles per comparison window (6 cycles = 24h at 4h cadence).
            drift_threshold_percent: Relative change between windows that counts as drift.
        """
        self.name = name
        self.metric_thresholds = (
            dict(DEFAULT_CYCLE_THRESHOLDS) if metric_thresholds is None else metric_thresholds
        )
        self.drift_window = drift_window
        self.drift_threshold_percent = drift_threshold_percent
        # Stores metric_name -> List[(timestamp, value)]
        self.metrics_history: dict[str, list[tuple[datetime, float]]] = defaultdict(list)
        self.alerts: list[str] = []
        logger.info(f"Initialized monitor {name}")

    def record_metrics(self, metrics_dict: dict[str, float], timestamp: datetime | None = None):
        """Record a set of cycle metrics at a specific time."""
        ts = timestamp or datetime.now()
        for metric, value in metrics_dict.items():
            if not isinstance(value, int | float):
                logger.warning(f"Metric '{metric}' for {self.name} has non-numeric value: {value}. Skipping.")
                continue

            self.metrics_history[metric].append((ts, float(value)))
            logger.debug(f"Recorded metric for {self.name}: {metric}={value}")

            if metric in self.metric_thresholds:
                min_val, max_val = self.metric_thresholds[metric]
                if not (min_val <= value <= max_val):
                    self.trigger_alert(metric, value, min_val, max_val)

            if self.detect_drift(metric):
                logger.warning(f"Drift detected for metric '{metric}' in {self.name}")

    def detect_drift(self, metric: str) -> bool:
        """Compare the mean of the latest window against the window before it."""
        history = self.metrics_history.get(metric, [])
        window = self.drift_window
        if len(history) < window * 2:
            return False  # Not enough history

        recent_avg = np.mean([v for _, v in history[-window:]])
        previous_avg = np.mean([v for _, v in history[-window * 2 : -window]])

        if previous_avg == 0:  # Avoid division by zero
            return bool(recent_avg != 0)

        percent_change = abs((recent_avg - previous_avg) / previous_avg) * 100
        return bool(percent_change > self.drift_threshold_percent)

    def trigger_alert(self, metric: str, value: float, min_threshold: float, max_threshold: float):
        message = (
            f"ALERT [{self.name}] - Metric '{metric}' value {value:.2f} outside "
            f"acceptable range [{min_threshold:.2f}, {max_threshold:.2f}]"
        )
        logger.warning(message)
        self.alerts.append(message)

    def latest(self, metric: str) -> float | None:
        history = self.metrics_history.get(metric)
        return history[-1][1] if history else None
