"""
Demand estimator producing a simulated, intentionally noisy demand signal per
service: a 24h request volume around the catalog baseline plus a 7-day trend,
combined into a composite score in [0, 1].
"""

import math
import random

from config.config import PriceMonitorConfig
from connectors.service_catalog import ServiceCatalog
from models.pricing import DemandSignal
from utils.logger import get_logger

logger = get_logger(__name__)


def box_muller(u1: float, u2: float) -> float:
    """Turn two uniform samples on [0, 1) into one standard-normal sample."""
    u1 = max(u1, 1e-10)  # log(0) guard
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def normalise_count(count: float, baseline: float) -> float:
    """Count relative to twice the baseline, capped at 1.0; zero baseline is neutral."""
    if baseline <= 0:
        return 0.5
    return min(1.0, count / (baseline * 2))


def normalise_trend(trend: float) -> float:
    """Map a trend in [-1, +1] onto [0, 1]."""
    return min(1.0, max(0.0, (trend + 1.0) / 2.0))


class DemandEstimator:
    """
    Synthesises demand signals without real telemetry.

    ``sampler`` must provide ``random()`` and ``uniform(a, b)``; a seeded
    ``random.Random`` makes the signal reproducible in tests.
    """

    def __init__(
        self,
        catalog: ServiceCatalog,
        config: PriceMonitorConfig | None = None,
        sampler: random.Random | None = None,
    ):
        self.catalog = catalog
        self.config = config or PriceMonitorConfig()
        self.sampler = sampler or random.Random()

    def baseline_for(self, service_id: str) -> int:
        if service_id in self.catalog:
            return self.catalog.get_baseline_requests(service_id)
        return self.config.default_baseline_requests

    def simulate_request_count_24h(self, service_id: str) -> int:
        """Baseline plus normal noise (std = 30% of baseline), floored at zero."""
        baseline = self.baseline_for(service_id)
        std_normal = box_muller(self.sampler.random(), self.sampler.random())
        count = round(baseline + std_normal * baseline * self.config.request_noise_std)
        return max(0, count)

    def simulate_trend_7d(self) -> float:
        # Skewed toward growth: -20% .. +40% by default
        return self.sampler.uniform(self.config.trend_min, self.config.trend_max)

    def compute_demand_score(self, service_id: str) -> DemandSignal:
        request_count_24h = self.simulate_request_count_24h(service_id)
        trend_7d = self.simulate_trend_7d()
        baseline = self.baseline_for(service_id)

        count_score = normalise_count(request_count_24h, baseline)
        trend_score = normalise_trend(trend_7d)
        score = self.config.volume_weight * count_score + self.config.trend_weight * trend_score
        score = min(1.0, max(0.0, score))

        logger.debug(
            f"Demand for {service_id}: count_score={count_score:.3f} "
            f"trend_score={trend_score:.3f} -> {score:.3f}"
        )
        return DemandSignal(score=score, request_count_24h=request_count_24h, trend_7d=trend_7d)
