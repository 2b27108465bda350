"""
Price policy: deterministic mapping from a demand score to a bounded price,
plus the status/margin helpers the read API reports alongside live prices.
"""

from models.enums import PriceStatus

DEMAND_HIGH_THRESHOLD = 0.70
DEMAND_LOW_THRESHOLD = 0.40


def demand_to_price(
    demand: float,
    floor_price: float,
    target_price: float,
    low_threshold: float = DEMAND_LOW_THRESHOLD,
    high_threshold: float = DEMAND_HIGH_THRESHOLD,
) -> float:
    """
    Map a demand score to a concrete price between floor and target.

        demand >= high_threshold -> target_price  (hold the ceiling)
        demand <  low_threshold  -> floor_price   (drop to floor)
        otherwise                -> linear interpolation

    The result never falls below floor_price, whatever the thresholds.
    """
    if demand >= high_threshold:
        price = target_price
    elif demand < low_threshold:
        price = floor_price
    else:
        t = (demand - low_threshold) / (high_threshold - low_threshold)
        price = floor_price + t * (target_price - floor_price)

    # Hard floor: never below cost x 2.0
    return max(price, floor_price)


def classify_price_status(
    current_price: float, floor_price: float, target_price: float, band: float = 0.01
) -> PriceStatus:
    """Classify a live price for colour-coding; target wins when both bands overlap."""
    if current_price >= target_price * (1 - band):
        return PriceStatus.TARGET
    if current_price <= floor_price * (1 + band):
        return PriceStatus.FLOOR
    return PriceStatus.INTERPOLATED


def margin_percent(price: float, cost: float, decimals: int = 1) -> float:
    """Margin over cost in percent, ((price - cost) / cost) x 100."""
    return round((price - cost) / cost * 100, decimals)
