import pytest

from agents.price_policy import classify_price_status, demand_to_price, margin_percent
from models.enums import PriceStatus

FLOOR = 0.02
TARGET = 0.03


# --- Test demand_to_price --- #


def test_mid_band_demand_interpolates():
    """0.55 sits halfway through the 0.40-0.70 band."""
    assert demand_to_price(0.55, FLOOR, TARGET) == pytest.approx(0.025)


def test_high_demand_holds_target_exactly():
    assert demand_to_price(0.85, FLOOR, TARGET) == TARGET
    assert demand_to_price(0.70, FLOOR, TARGET) == TARGET


def test_low_demand_drops_to_floor_exactly():
    assert demand_to_price(0.0, FLOOR, TARGET) == FLOOR
    assert demand_to_price(0.399999, FLOOR, TARGET) == FLOOR


def test_low_threshold_is_inclusive_of_interpolation():
    assert demand_to_price(0.40, FLOOR, TARGET) == pytest.approx(FLOOR)


@pytest.mark.parametrize("demand", [0.0, 0.2, 0.399999, 0.4, 0.55, 0.7, 0.9, 1.0])
def test_price_never_below_floor(demand):
    assert demand_to_price(demand, FLOOR, TARGET) >= FLOOR


def test_interpolation_is_monotone():
    demands = [0.40 + i * 0.3 / 300 for i in range(301)]
    prices = [demand_to_price(d, FLOOR, TARGET) for d in demands]
    assert all(a <= b for a, b in zip(prices, prices[1:]))
    assert all(FLOOR <= p <= TARGET for p in prices)


def test_custom_thresholds():
    assert demand_to_price(0.6, FLOOR, TARGET, low_threshold=0.5, high_threshold=0.9) == pytest.approx(0.0225)
    assert demand_to_price(0.95, FLOOR, TARGET, low_threshold=0.5, high_threshold=0.9) == TARGET


def test_floor_guard_survives_inverted_band():
    """Even a target below the floor cannot pull the price under the floor."""
    assert demand_to_price(0.9, floor_price=0.02, target_price=0.01) == 0.02


# --- Test classify_price_status --- #


@pytest.mark.parametrize(
    "price, expected",
    [
        (0.03, PriceStatus.TARGET),
        (0.02975, PriceStatus.TARGET),  # within 1% of target
        (0.0295, PriceStatus.INTERPOLATED),
        (0.025, PriceStatus.INTERPOLATED),
        (0.0201, PriceStatus.FLOOR),  # within 1% of floor
        (0.02, PriceStatus.FLOOR),
    ],
)
def test_classify_price_status(price, expected):
    assert classify_price_status(price, FLOOR, TARGET) == expected


def test_target_wins_when_bands_overlap():
    assert classify_price_status(0.02, 0.02, 0.0201) == PriceStatus.TARGET


# --- Test margin_percent --- #


def test_margin_percent():
    assert margin_percent(0.03, 0.01) == pytest.approx(200.0)
    assert margin_percent(0.02, 0.01) == pytest.approx(100.0)
    assert margin_percent(0.0285, 0.01) == pytest.approx(185.0)
    assert margin_percent(0.012345, 0.01, decimals=0) == pytest.approx(23.0)
