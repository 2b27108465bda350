"""
Module: connectors.service_catalog

Read-only catalog of priced services: measured per-call cost, display label
and the baseline 24h request volume used by the demand simulation.
"""

from collections.abc import Iterable, Iterator

from models.pricing import ServiceCatalogEntry

DEFAULT_BASELINE_REQUESTS_24H = 100


class ServiceCatalog:
    """
    Catalog connector for priced services. Iteration follows insertion order.
    """

    # Measured operational costs (SOL per call) and baseline daily volumes.
    # Baselines would come from usage analytics in production.
    _default_services = (
        ("walletScan", "Wallet Scanner", 0.003, 120),
        ("basic", "Basic Analysis", 0.0004, 300),
        ("pro", "Pro Analysis", 0.004, 80),
        ("institutional", "Institutional", 0.03, 15),
        ("poolAnalyzer", "Pool Analyzer", 0.0004, 200),
        ("protocolAuditor", "Protocol Auditor", 0.0008, 60),
        ("yieldOptimizer", "Yield Optimizer", 0.0006, 90),
        ("tokenDeepDive", "Token Deep Dive", 0.001, 50),
        ("aeonMonthly", "AEON Monthly", 0.015, 25),
        ("hermesPerTx", "HERMES / TX", 0.0008, 400),
    )

    def __init__(self, entries: Iterable[ServiceCatalogEntry]):
        self._entries: dict[str, ServiceCatalogEntry] = {}
        for entry in entries:
            if entry.service_id in self._entries:
                raise ValueError(f"Duplicate service id in catalog: {entry.service_id}")
            self._entries[entry.service_id] = entry

    @classmethod
    def default(cls) -> "ServiceCatalog":
        """The production service catalog."""
        return cls(
            ServiceCatalogEntry(
                service_id=sid,
                display_name=name,
                cost=cost,
                baseline_requests_24h=baseline,
            )
            for sid, name, cost, baseline in cls._default_services
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ServiceCatalogEntry]:
        return iter(self._entries.values())

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._entries

    def entries(self) -> list[ServiceCatalogEntry]:
        return list(self._entries.values())

    def all_service_ids(self) -> list[str]:
        return list(self._entries)

    def get(self, service_id: str) -> ServiceCatalogEntry:
        """Get a catalog entry by ID. Raises KeyError for unknown services."""
        try:
            return self._entries[service_id]
        except KeyError:
            raise KeyError(f"Unknown service: {service_id}") from None

    def get_service_cost(self, service_id: str) -> float:
        return self.get(service_id).cost

    def get_price_floor(self, service_id: str) -> float:
        return self.get(service_id).floor_price

    def get_target_price(self, service_id: str) -> float:
        return self.get(service_id).target_price

    def get_baseline_requests(self, service_id: str) -> int:
        """Baseline 24h request count; unknown services use the neutral default."""
        entry = self._entries.get(service_id)
        if entry is None:
            return DEFAULT_BASELINE_REQUESTS_24H
        return entry.baseline_requests_24h

    def calculate_service_margin(self, service_id: str, price: float | None = None) -> float:
        """Margin as a fraction of cost at ``price`` (target price by default)."""
        entry = self.get(service_id)
        if price is None:
            price = entry.target_price
        return (price - entry.cost) / entry.cost

    def meets_minimum_margin(self, service_id: str, minimum: float = 0.20) -> bool:
        """Check the platform-wide cost + 20% rule at the service's floor price."""
        entry = self.get(service_id)
        return self.calculate_service_margin(service_id, entry.floor_price) >= minimum
