"""Test doubles for the pricing engine's collaborators."""

from itertools import cycle

from models.pricing import DemandSignal


# Deterministic stand-in for random.Random
class StubSampler:
    """Replays fixed values from ``random()``; ``uniform(a, b)`` maps them onto [a, b]."""

    def __init__(self, values=(0.5,)):
        self._values = cycle(values)

    def random(self):
        return next(self._values)

    def uniform(self, a, b):
        return a + (b - a) * self.random()


# Demand estimator returning the same score for every service
class FixedDemandEstimator:
    def __init__(self, score, failing_ids=()):
        self.score = score
        self.failing_ids = set(failing_ids)
        self.calls = []

    def compute_demand_score(self, service_id):
        self.calls.append(service_id)
        if service_id in self.failing_ids:
            raise RuntimeError(f"demand feed unavailable for {service_id}")
        return DemandSignal(score=self.score, request_count_24h=100, trend_7d=0.1)
