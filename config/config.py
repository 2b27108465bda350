"""
Configuration classes for the price-monitor service.
Defines the pricing engine's tunables in a type-safe, extensible way and
loads deployment settings (secret, environment) from the process environment.
"""

from dataclasses import dataclass
from datetime import timedelta

from utils.env import get_env, load_project_dotenv


@dataclass
class PriceMonitorConfig:
    # Scheduling and history
    adjustment_interval_hours: float = 4.0
    history_limit: int = 50
    history_window_hours: float = 24.0

    # Inter-cycle random walk (fraction of current price, each direction)
    random_walk_pct: float = 0.05
    price_precision: int = 8  # SOL precision

    # Demand -> price mapping
    demand_high_threshold: float = 0.70
    demand_low_threshold: float = 0.40

    # Demand signal simulation
    volume_weight: float = 0.6
    trend_weight: float = 0.4
    request_noise_std: float = 0.30  # fraction of baseline
    default_baseline_requests: int = 100
    trend_min: float = -0.20
    trend_max: float = 0.40

    # Presentation
    demand_precision: int = 3
    margin_precision: int = 1
    status_band: float = 0.01  # within 1% of floor/target counts as "at" it

    # /adjust authorization
    cron_secret: str | None = None
    environment: str = "production"
    secret_header: str = "x-cron-secret"

    def __post_init__(self):
        if not 0.0 <= self.demand_low_threshold < self.demand_high_threshold <= 1.0:
            raise ValueError(
                "Demand thresholds must satisfy 0 <= low < high <= 1, got "
                f"low={self.demand_low_threshold}, high={self.demand_high_threshold}"
            )
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        if self.random_walk_pct < 0:
            raise ValueError("random_walk_pct must be non-negative")
        if self.trend_min > self.trend_max:
            raise ValueError("trend_min must not exceed trend_max")
        if self.adjustment_interval_hours <= 0:
            raise ValueError("adjustment_interval_hours must be positive")

    @property
    def adjustment_interval(self) -> timedelta:
        return timedelta(hours=self.adjustment_interval_hours)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


def load_price_monitor_config(**overrides) -> PriceMonitorConfig:
    """
    Build a PriceMonitorConfig from the project `.env` and process environment.

    Recognised variables: CRON_SECRET, APP_ENV (or ENVIRONMENT),
    PRICE_ADJUSTMENT_INTERVAL_HOURS, PRICE_HISTORY_LIMIT. Keyword overrides
    win over the environment.
    """
    load_project_dotenv()
    values = {
        "cron_secret": get_env("CRON_SECRET", str),
        "environment": get_env("APP_ENV", str) or get_env("ENVIRONMENT", str, "production"),
    }
    interval = get_env("PRICE_ADJUSTMENT_INTERVAL_HOURS", float)
    if interval is not None:
        values["adjustment_interval_hours"] = interval
    history_limit = get_env("PRICE_HISTORY_LIMIT", int)
    if history_limit is not None:
        values["history_limit"] = history_limit
    values.update(overrides)
    return PriceMonitorConfig(**values)


# Example usage:
# config = load_price_monitor_config()
# dev_config = PriceMonitorConfig(environment="development", cron_secret=None)
