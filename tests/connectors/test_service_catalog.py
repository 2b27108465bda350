import pytest

from connectors.service_catalog import DEFAULT_BASELINE_REQUESTS_24H, ServiceCatalog
from models.pricing import ServiceCatalogEntry


@pytest.fixture
def catalog() -> ServiceCatalog:
    """Provides the default service catalog."""
    return ServiceCatalog.default()


# --- Test default catalog --- #


def test_default_catalog_contents(catalog):
    assert len(catalog) == 10
    assert catalog.all_service_ids() == [
        "walletScan",
        "basic",
        "pro",
        "institutional",
        "poolAnalyzer",
        "protocolAuditor",
        "yieldOptimizer",
        "tokenDeepDive",
        "aeonMonthly",
        "hermesPerTx",
    ]


def test_every_entry_has_valid_band(catalog):
    """0 < floor <= target for every service."""
    for entry in catalog:
        assert 0 < entry.floor_price <= entry.target_price


def test_lookups(catalog):
    assert catalog.get("walletScan").display_name == "Wallet Scanner"
    assert catalog.get_service_cost("walletScan") == 0.003
    assert catalog.get_price_floor("walletScan") == pytest.approx(0.006)
    assert catalog.get_target_price("walletScan") == pytest.approx(0.009)
    assert catalog.get_baseline_requests("hermesPerTx") == 400
    assert "pro" in catalog
    assert "unknown" not in catalog


def test_get_unknown_service_raises(catalog):
    with pytest.raises(KeyError):
        catalog.get("doesNotExist")


def test_unknown_service_baseline_defaults(catalog):
    assert catalog.get_baseline_requests("doesNotExist") == DEFAULT_BASELINE_REQUESTS_24H


# --- Test margins --- #


def test_service_margin_at_target_and_floor(catalog):
    assert catalog.calculate_service_margin("pro") == pytest.approx(2.0)
    floor = catalog.get_price_floor("pro")
    assert catalog.calculate_service_margin("pro", floor) == pytest.approx(1.0)


def test_all_services_meet_minimum_margin(catalog):
    assert all(catalog.meets_minimum_margin(sid) for sid in catalog.all_service_ids())


# --- Test custom catalogs --- #


def test_custom_catalog_preserves_order():
    catalog = ServiceCatalog(
        [
            ServiceCatalogEntry("b", "B", cost=0.02),
            ServiceCatalogEntry("a", "A", cost=0.01),
        ]
    )
    assert catalog.all_service_ids() == ["b", "a"]
    assert [e.service_id for e in catalog.entries()] == ["b", "a"]


def test_duplicate_service_ids_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        ServiceCatalog(
            [
                ServiceCatalogEntry("a", "A", cost=0.01),
                ServiceCatalogEntry("a", "A again", cost=0.02),
            ]
        )
