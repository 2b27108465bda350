"""
Pricing-related data models for the price-monitor service.
Catalog entries, live per-service price state, and the adjustment log.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

# Floor = cost x 2.0 (100% margin); target = cost x 3.0 (200% margin)
FLOOR_COST_MULTIPLIER = 2.0
TARGET_COST_MULTIPLIER = 3.0
SOL_DECIMALS = 8


def round_sol(value: float, decimals: int = SOL_DECIMALS) -> float:
    """Round a SOL amount to a fixed number of decimal places."""
    return round(value, decimals)


@dataclass(frozen=True)
class ServiceCatalogEntry:
    """
    A priced operation as supplied by the catalog. Immutable.
    """

    service_id: str
    display_name: str
    cost: float  # measured per-call operating cost (SOL)
    baseline_requests_24h: int = 100

    def __post_init__(self):
        if not self.service_id:
            raise ValueError("service_id must be a non-empty string")
        if self.cost <= 0:
            raise ValueError(f"Service {self.service_id} must have a positive cost, got {self.cost}")
        if self.baseline_requests_24h < 0:
            raise ValueError(f"Service {self.service_id} has a negative request baseline")

    @property
    def floor_price(self) -> float:
        return round_sol(self.cost * FLOOR_COST_MULTIPLIER)

    @property
    def target_price(self) -> float:
        return round_sol(self.cost * TARGET_COST_MULTIPLIER)


@dataclass
class ServicePriceState:
    """
    Live price and bookkeeping for one service. Owned by the PriceStateStore.
    """

    service_id: str
    display_name: str
    base_cost: float
    floor_price: float
    target_price: float
    current_price: float
    last_adjusted: datetime
    next_adjustment: datetime
    last_demand_score: float = 1.0

    @classmethod
    def from_catalog_entry(
        cls, entry: ServiceCatalogEntry, now: datetime, interval: timedelta
    ) -> "ServicePriceState":
        """Initial state: priced at target with an optimistic demand score."""
        return cls(
            service_id=entry.service_id,
            display_name=entry.display_name,
            base_cost=entry.cost,
            floor_price=entry.floor_price,
            target_price=entry.target_price,
            current_price=entry.target_price,
            last_adjusted=now,
            next_adjustment=now + interval,
            last_demand_score=1.0,
        )

    def copy(self) -> "ServicePriceState":
        return replace(self)


@dataclass(frozen=True)
class PriceChange:
    """One service's line in an adjustment batch."""

    service_id: str
    display_name: str
    old_price: float
    new_price: float
    demand: float

    @property
    def changed(self) -> bool:
        return self.old_price != self.new_price


@dataclass(frozen=True)
class AdjustmentRecord:
    """
    Immutable log entry for one committed adjustment batch.
    """

    id: int
    adjusted_at: datetime
    changes: tuple[PriceChange, ...] = field(default_factory=tuple)

    @property
    def services_adjusted(self) -> int:
        return sum(1 for change in self.changes if change.changed)


@dataclass(frozen=True)
class DemandSignal:
    """Composite demand score plus the raw inputs it was built from."""

    score: float
    request_count_24h: int
    trend_7d: float
