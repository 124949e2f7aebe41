from __future__ import annotations

from decimal import Decimal

import pytest

from app.pricing.config import PricingConfig, ShippingMethod, ShippingRate, reset_pricing_config_cache
from app.pricing.engine import LandedCostEngine
from app.pricing.models import CatalogProduct, ProductCostSpec


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    # process-wide default config is cached; isoleer tests van elkaar
    reset_pricing_config_cache()
    yield
    reset_pricing_config_cache()


@pytest.fixture
def config():
    return PricingConfig(
        rates={
            ShippingMethod.AIR_EXPRESS: ShippingRate(Decimal("0.15"), Decimal("25.00")),
            ShippingMethod.SEA_FREIGHT: ShippingRate(Decimal("0.08"), Decimal("15.00")),
        },
        exchange_rate=Decimal("2.02"),
    )


@pytest.fixture
def engine(config):
    return LandedCostEngine(config)


@pytest.fixture
def sample_product():
    # worked example: 1.10 USD, 100/ctn, 15 kg/ctn, 20% duties, 30% margin
    return ProductCostSpec(
        unit_cost_usd=Decimal("1.10"),
        case_pack_size=100,
        carton_weight_kg=Decimal("15"),
        duties_percent=Decimal("20"),
        profit_margin_percent=Decimal("30"),
    )


@pytest.fixture
def sample_record():
    return {
        "unitCostUSD": 1.10,
        "casePackSize": 100,
        "cartonWeightKg": 15,
        "dutiesPercent": 20,
        "profitMarginPercent": 30,
        "profitOverridePercent": 0,
        "setupCostUSD": 0,
    }


@pytest.fixture
def catalog(sample_product):
    return {
        "P-100": CatalogProduct(
            product_id="P-100",
            name="Branded pens",
            description="Ballpoint, blue ink",
            cost=sample_product,
            lead_time_days=21,
        ),
        "P-200": CatalogProduct(
            product_id="P-200",
            name="Tote bags",
            cost=ProductCostSpec(
                unit_cost_usd=Decimal("2.00"),
                case_pack_size=10,
                carton_weight_kg=Decimal("1"),
                duties_percent=Decimal("0"),
                profit_margin_percent=Decimal("0"),
                setup_cost_usd=Decimal("100"),
            ),
            lead_time_days=30,
        ),
    }
