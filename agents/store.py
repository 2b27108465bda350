"""
Price state store: the single source of truth for live per-service prices and
the capped, newest-first log of committed adjustment batches.

The hosting process constructs one store at startup and hands it to the
scheduler and the read API; there is no teardown. All mutation goes through
``apply_adjustments`` (scheduler batches) and ``apply_random_walk`` (reads).
"""

import random
import threading
from collections.abc import Iterable
from datetime import datetime, timezone

from config.config import PriceMonitorConfig
from connectors.service_catalog import ServiceCatalog
from models.pricing import AdjustmentRecord, PriceChange, ServicePriceState, round_sol
from utils.logger import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PriceStateStore:
    """
    In-memory price state guarded by a single re-entrant lock.

    Callers that need several operations to appear atomic to other threads
    (a full read snapshot, or a scheduler's read-compute-commit pass) hold
    ``store.lock`` around them; individual operations take it themselves.
    """

    def __init__(
        self,
        catalog: ServiceCatalog,
        config: PriceMonitorConfig | None = None,
        sampler: random.Random | None = None,
        now: datetime | None = None,
    ):
        self.config = config or PriceMonitorConfig()
        self._sampler = sampler or random.Random()
        self._lock = threading.RLock()
        self._states: dict[str, ServicePriceState] = {}
        self._history: list[AdjustmentRecord] = []  # newest first
        self._adjustment_counter = 0

        started_at = now or utcnow()
        for entry in catalog:
            self._states[entry.service_id] = ServicePriceState.from_catalog_entry(
                entry, started_at, self.config.adjustment_interval
            )
        logger.info(f"Initialized price state for {len(self._states)} services at target price")

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def __len__(self) -> int:
        return len(self._states)

    def service_ids(self) -> list[str]:
        with self._lock:
            return list(self._states)

    def get_state(self, service_id: str) -> ServicePriceState | None:
        """Return a copy of one service's state, or None if unknown."""
        with self._lock:
            state = self._states.get(service_id)
            return state.copy() if state else None

    def snapshot(self) -> list[ServicePriceState]:
        """Copies of every service's state, in catalog order."""
        with self._lock:
            return [state.copy() for state in self._states.values()]

    def history(self) -> list[AdjustmentRecord]:
        """Adjustment records, newest first."""
        with self._lock:
            return list(self._history)

    def apply_adjustments(
        self, changes: Iterable[PriceChange], now: datetime | None = None
    ) -> AdjustmentRecord:
        """
        Commit a scheduler batch atomically and log it.

        Each change overwrites its service's price and demand score and stamps
        ``last_adjusted``/``next_adjustment``. Changes naming a service that is
        not in the store are skipped. The new record gets the next id, goes to
        the front of the history, and the history is trimmed to the limit.
        """
        now = now or utcnow()
        changes = tuple(changes)
        next_time = now + self.config.adjustment_interval

        with self._lock:
            for change in changes:
                state = self._states.get(change.service_id)
                if state is None:
                    logger.warning(f"Skipping adjustment for unknown service {change.service_id}")
                    continue
                state.current_price = change.new_price
                state.last_demand_score = change.demand
                state.last_adjusted = now
                state.next_adjustment = next_time

            self._adjustment_counter += 1
            record = AdjustmentRecord(
                id=self._adjustment_counter,
                adjusted_at=now,
                changes=changes,
            )
            self._history.insert(0, record)
            del self._history[self.config.history_limit :]

        return record

    def apply_random_walk(self, service_id: str) -> float:
        """
        Nudge one live price by a uniform step of up to +/- random_walk_pct,
        clamp it into [floor, target], round it and store it.

        Demand score and adjustment timestamps are left alone; they only
        reflect scheduler decisions. Raises KeyError for unknown services.
        """
        with self._lock:
            state = self._states.get(service_id)
            if state is None:
                raise KeyError(f"Unknown service: {service_id}")

            pct = self.config.random_walk_pct
            delta = self._sampler.uniform(-pct, pct)
            raw = state.current_price * (1 + delta)
            clamped = min(state.target_price, max(state.floor_price, raw))
            state.current_price = round_sol(clamped, self.config.price_precision)
            return state.current_price
