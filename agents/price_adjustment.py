"""
Adjustment scheduler: one full repricing pass over the catalog per trigger.

The engine holds no timer. An external cron-style trigger (every 4 hours in
production) calls ``run_cycle``; overlapping triggers queue behind a single
cycle lock so each pass reads, computes and commits before the next starts.
"""

import threading
from collections.abc import Callable
from datetime import datetime

import numpy as np

from agents.demand import DemandEstimator
from agents.price_policy import demand_to_price
from agents.store import PriceStateStore, utcnow
from config.config import PriceMonitorConfig
from models.pricing import AdjustmentRecord, PriceChange, ServicePriceState, round_sol
from utils.logger import get_logger
from utils.monitoring import AdjustmentMonitor

logger = get_logger(__name__)

PricePolicy = Callable[..., float]


class AdjustmentScheduler:
    """Runs the demand estimator and price policy over every service and commits once."""

    def __init__(
        self,
        store: PriceStateStore,
        estimator: DemandEstimator,
        config: PriceMonitorConfig | None = None,
        monitor: AdjustmentMonitor | None = None,
        policy: PricePolicy = demand_to_price,
    ):
        self.store = store
        self.estimator = estimator
        self.config = config or store.config
        self.monitor = monitor
        self.policy = policy
        self._cycle_lock = threading.Lock()

    def next_adjustment(self, adjusted_at: datetime) -> datetime:
        return adjusted_at + self.config.adjustment_interval

    def run_cycle(self, now: datetime | None = None) -> AdjustmentRecord:
        """
        Reprice every service and commit the batch.

        A service whose computation fails is logged and left out of the batch,
        so its previous price and timestamps stay as they were. The commit
        happens even when nothing changed.
        """
        with self._cycle_lock, self.store.lock:
            now = now or utcnow()
            changes: list[PriceChange] = []
            for state in self.store.snapshot():
                try:
                    changes.append(self._adjust_service(state))
                except Exception as e:
                    logger.error(
                        f"Adjustment failed for {state.service_id}, keeping previous price: {e}",
                        exc_info=True,
                    )
            record = self.store.apply_adjustments(changes, now)

        logger.info(
            f"Adjustment #{record.id} committed: {record.services_adjusted}/{len(record.changes)} "
            f"services changed, next run at {self.next_adjustment(now).isoformat()}"
        )
        self._record_metrics(record)
        return record

    def _adjust_service(self, state: ServicePriceState) -> PriceChange:
        signal = self.estimator.compute_demand_score(state.service_id)
        old_price = state.current_price
        new_price = round_sol(
            self.policy(
                signal.score,
                state.floor_price,
                state.target_price,
                self.config.demand_low_threshold,
                self.config.demand_high_threshold,
            ),
            self.config.price_precision,
        )

        logger.info(
            f"{state.service_id}: {old_price:.8f} -> {new_price:.8f} | "
            f"demand={signal.score:.3f} requests24h={signal.request_count_24h} "
            f"trend7d={signal.trend_7d * 100:.1f}%"
        )
        return PriceChange(
            service_id=state.service_id,
            display_name=state.display_name,
            old_price=old_price,
            new_price=new_price,
            demand=round(signal.score, self.config.demand_precision),
        )

    def _record_metrics(self, record: AdjustmentRecord) -> None:
        if self.monitor is None or not record.changes:
            return
        try:
            costs = {state.service_id: state.base_cost for state in self.store.snapshot()}
            margins = [
                (change.new_price - costs[change.service_id]) / costs[change.service_id] * 100
                for change in record.changes
                if change.service_id in costs
            ]
            metrics = {
                "mean_demand": float(np.mean([change.demand for change in record.changes])),
                "services_adjusted": record.services_adjusted,
            }
            if margins:
                metrics["mean_margin_percent"] = float(np.mean(margins))
            self.monitor.record_metrics(metrics, record.adjusted_at)
        except Exception as e:
            logger.error(f"Failed to record metrics for adjustment #{record.id}: {e}")
