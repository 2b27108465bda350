"""
Read side of the pricing engine: live prices (with the inter-cycle random walk
applied on every read) and the windowed adjustment history.
"""

import re
from datetime import datetime, timedelta

from agents.price_policy import classify_price_status, margin_percent
from agents.store import PriceStateStore, utcnow
from config.config import PriceMonitorConfig
from models.api import (
    AdjustmentRecordModel,
    HistoryResponse,
    PricesResponse,
    ServicePriceSnapshot,
)
from utils.logger import get_logger

logger = get_logger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def parse_history_limit(raw: str | int | None, maximum: int = 50) -> int:
    """
    Parse a ``limit`` query value from its leading integer, so "5.0" and
    "10abc" read as 5 and 10. Missing, non-numeric or non-positive values
    fall back to ``maximum``; anything larger is capped at it.
    """
    if raw is None:
        return maximum
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return maximum
    parsed = int(match.group(1))
    if parsed <= 0:
        return maximum
    return min(parsed, maximum)


class PriceMonitor:
    """Read API over a PriceStateStore."""

    def __init__(self, store: PriceStateStore, config: PriceMonitorConfig | None = None):
        self.store = store
        self.config = config or store.config

    def get_live_prices(self, now: datetime | None = None) -> PricesResponse:
        """
        Walk every service's price once and return the resulting snapshot.
        The whole pass runs under the store lock so a batch commit is never
        seen half-applied.
        """
        with self.store.lock:
            services = [self._walk_and_snapshot(service_id) for service_id in self.store.service_ids()]
        return PricesResponse(
            fetched_at=now or utcnow(),
            count=len(services),
            services=services,
        )

    def _walk_and_snapshot(self, service_id: str) -> ServicePriceSnapshot:
        live_price = self.store.apply_random_walk(service_id)
        state = self.store.get_state(service_id)
        return ServicePriceSnapshot(
            service_id=state.service_id,
            display_name=state.display_name,
            current_price=live_price,
            base_cost=state.base_cost,
            floor_price=state.floor_price,
            target_price=state.target_price,
            margin=margin_percent(live_price, state.base_cost, self.config.margin_precision),
            last_adjusted=state.last_adjusted,
            next_adjustment=state.next_adjustment,
            last_demand_score=state.last_demand_score,
            price_status=classify_price_status(
                live_price, state.floor_price, state.target_price, self.config.status_band
            ),
        )

    def get_history(
        self,
        limit: int | str | None = None,
        window_hours: float | None = None,
        now: datetime | None = None,
    ) -> HistoryResponse:
        """Records adjusted within the last ``window_hours``, newest first, at most ``limit``."""
        now = now or utcnow()
        limit = parse_history_limit(limit, self.config.history_limit)
        if window_hours is None:
            window_hours = self.config.history_window_hours
        cutoff = now - timedelta(hours=window_hours)

        # history() is already newest-first
        records = [r for r in self.store.history() if r.adjusted_at >= cutoff][:limit]
        total_services_changed = sum(r.services_adjusted for r in records)
        logger.debug(f"History request: {len(records)} records within {window_hours}h (limit {limit})")

        return HistoryResponse(
            fetched_at=now,
            count=len(records),
            total_services_changed=total_services_changed,
            history=[AdjustmentRecordModel.from_record(r) for r in records],
        )
