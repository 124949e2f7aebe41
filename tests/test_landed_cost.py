from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from decimal import Decimal

import pytest

from app.pricing.config import ShippingMethod
from app.pricing.engine import LandedCostEngine, compute_all_pricing, compute_landed_cost
from app.pricing.errors import ArithmeticDegenerate, InvalidShippingMethod
from app.pricing.models import ProductCostSpec
from app.pricing.money import qmoney

D = Decimal
AIR = ShippingMethod.AIR_EXPRESS
SEA = ShippingMethod.SEA_FREIGHT


def test_worked_example_air_express(engine, sample_product):
    r = engine.compute_landed_cost(sample_product, 300, AIR)

    assert r.cartons == 3
    assert r.total_weight_kg == D("45")
    # 45 * 0.15 = 6.75 < 25 -> minimum
    assert r.shipping_cost_usd == D("25.00")
    assert r.duties_amount_usd == D("0.22")
    assert r.setup_cost_usd == D("0")
    assert qmoney(r.landed_cost_per_unit_usd) == D("1.40")
    assert r.landed_cost_per_unit_usd.quantize(D("0.0001")) == D("1.4033")
    assert r.unit_price_usd.quantize(D("0.0001")) == D("1.8243")
    assert r.unit_price_settlement == D("3.69")
    # unrounded unit price * qty, then rounded: 3.685153.. * 300 = 1105.546
    assert r.total_price_settlement == D("1105.55")
    # 1105.546 - (1.32 * 2.02 * 300 = 799.92)
    assert r.total_gross_profit_settlement == D("305.63")
    assert r.exchange_rate_used == D("2.02")
    assert r.effective_profit_margin_percent == D("30")


def test_worked_example_sea_freight(engine, sample_product):
    r = engine.compute_landed_cost(sample_product, 300, SEA)

    assert r.shipping_cost_usd == D("15.00")
    assert r.landed_cost_per_unit_usd == D("1.37")
    assert r.unit_price_settlement == D("3.60")
    assert r.total_price_settlement == D("1079.29")
    assert r.total_gross_profit_settlement == D("279.37")


def test_partial_carton_rounds_up(engine, sample_product):
    r = engine.compute_landed_cost(sample_product, 101, AIR)
    assert r.cartons == 2
    assert r.total_weight_kg == D("30")

    assert engine.compute_landed_cost(sample_product, 100, AIR).cartons == 1
    assert engine.compute_landed_cost(sample_product, 1, AIR).cartons == 1


def test_decimal_case_pack_is_normalized_to_int(engine):
    # 101 / Decimal(100) zou met // naar 1 afkappen
    p = ProductCostSpec(
        unit_cost_usd=D("1.10"),
        case_pack_size=D("100"),
        carton_weight_kg=D("15"),
        duties_percent=D("20"),
        profit_margin_percent=D("30"),
    )
    assert p.case_pack_size == 100
    assert type(p.case_pack_size) is int

    r = engine.compute_landed_cost(p, 101, AIR)
    assert r.cartons == 2
    assert type(r.cartons) is int
    assert r.total_weight_kg == D("30")


def test_float_inputs_give_worked_example(engine):
    p = ProductCostSpec(
        unit_cost_usd=1.10,
        case_pack_size=100,
        carton_weight_kg=15.0,
        duties_percent=20.0,
        profit_margin_percent=30.0,
        setup_cost_usd=0.0,
    )
    assert p.unit_cost_usd == D("1.10")

    r = engine.compute_landed_cost(p, 300, AIR)
    assert r.unit_price_settlement == D("3.69")
    assert r.total_price_settlement == D("1105.55")
    assert r.total_gross_profit_settlement == D("305.63")


@pytest.mark.parametrize("case_pack", [2.5, D("12.4"), "0.5"])
def test_fractional_case_pack_rejected_on_construction(case_pack):
    with pytest.raises(ArithmeticDegenerate) as exc:
        ProductCostSpec(
            unit_cost_usd=D("1.10"),
            case_pack_size=case_pack,
            carton_weight_kg=D("15"),
            duties_percent=D("20"),
            profit_margin_percent=D("30"),
        )
    assert exc.value.field == "case_pack_size"


def test_heavy_shipment_above_minimum(engine, sample_product):
    r_air = engine.compute_landed_cost(sample_product, 2000, AIR)
    r_sea = engine.compute_landed_cost(sample_product, 2000, SEA)

    assert r_air.cartons == 20
    assert r_air.shipping_cost_usd == D("45.00")
    assert r_sea.shipping_cost_usd == D("24.00")


def test_override_zero_falls_back_to_default_margin(engine, sample_product):
    p = replace(sample_product, profit_margin_percent=D("25"), profit_override_percent=D("0"))
    assert engine.compute_landed_cost(p, 300, AIR).effective_profit_margin_percent == D("25")


def test_positive_override_wins(engine, sample_product):
    p = replace(sample_product, profit_margin_percent=D("25"), profit_override_percent=D("40"))
    r = engine.compute_landed_cost(p, 300, AIR)

    assert r.effective_profit_margin_percent == D("40")
    assert r.profit_override_percent == D("40")
    assert r.unit_price_usd == r.landed_cost_per_unit_usd * D("1.40")


def test_setup_cost_amortized_and_half_up_rounding(engine, catalog):
    product = catalog["P-200"]
    r = engine.compute_landed_cost(product, 100, AIR)

    # 2.00 + 0 + 25/100 + 100/100
    assert r.landed_cost_per_unit_usd == D("3.25")
    # 3.25 * 2.02 = 6.565 -> half-up
    assert r.unit_price_settlement == D("6.57")
    assert r.total_price_settlement == D("656.50")
    # shipping + setup are not cost of goods: 656.5 - 2.00 * 2.02 * 100
    assert r.total_gross_profit_settlement == D("252.50")


def test_currency_conversion_is_rounded_unit_price_times_rate(engine, sample_product):
    for qty in (1, 37, 300, 1234):
        for method in (AIR, SEA):
            r = engine.compute_landed_cost(sample_product, qty, method)
            assert r.unit_price_settlement == qmoney(r.unit_price_usd * r.exchange_rate_used)


def test_exchange_rate_override_only_changes_currency_outputs(config, sample_product):
    base = LandedCostEngine(config).compute_landed_cost(sample_product, 300, AIR)
    usd = LandedCostEngine(config.with_exchange_rate("1.0")).compute_landed_cost(sample_product, 300, AIR)

    for attr in (
        "cartons",
        "total_weight_kg",
        "shipping_cost_usd",
        "duties_amount_usd",
        "setup_cost_usd",
        "landed_cost_per_unit_usd",
        "unit_price_usd",
        "effective_profit_margin_percent",
    ):
        assert getattr(base, attr) == getattr(usd, attr), attr

    assert usd.exchange_rate_used == D("1.0")
    assert usd.unit_price_settlement == D("1.82")
    assert usd.total_price_settlement != base.total_price_settlement


def test_total_price_never_decreases_with_quantity(engine, sample_product):
    for method in (AIR, SEA):
        previous = D("0")
        for qty in range(1, 700):
            total = engine.compute_landed_cost(sample_product, qty, method).total_price_settlement
            assert total >= previous, (method, qty)
            previous = total


def test_unit_price_non_increasing_within_same_carton_count(engine, sample_product):
    p = replace(sample_product, setup_cost_usd=D("50"))
    for method in (AIR, SEA):
        prices = [engine.compute_landed_cost(p, q, method).unit_price_settlement for q in range(201, 301)]
        assert all(a >= b for a, b in zip(prices, prices[1:]))


def test_mapping_input_matches_dataclass(engine, sample_product, sample_record):
    from_record = engine.compute_landed_cost(sample_record, 300, AIR)
    from_spec = engine.compute_landed_cost(sample_product, 300, AIR)
    assert from_record == from_spec


def test_legacy_method_names_accepted(engine, sample_product):
    assert engine.compute_landed_cost(sample_product, 300, "DHL") == engine.compute_landed_cost(
        sample_product, 300, AIR
    )
    assert engine.compute_landed_cost(sample_product, 300, "sea").shipping_method == SEA


def test_unknown_shipping_method_raises(engine, sample_product):
    with pytest.raises(InvalidShippingMethod) as exc:
        engine.compute_landed_cost(sample_product, 300, "UPS")
    assert exc.value.method == "UPS"


@pytest.mark.parametrize("qty", [0, -5, 2.5, "10", True, None])
def test_degenerate_quantity_fails_fast(engine, sample_product, qty):
    with pytest.raises(ArithmeticDegenerate) as exc:
        engine.compute_landed_cost(sample_product, qty, AIR)
    assert exc.value.field == "quantity"


def test_zero_case_pack_fails_fast(engine, sample_product):
    p = replace(sample_product, case_pack_size=0)
    with pytest.raises(ArithmeticDegenerate) as exc:
        engine.compute_landed_cost(p, 10, AIR)
    assert exc.value.field == "case_pack_size"


def test_result_as_dict_exposes_full_breakdown(engine, sample_product):
    d = engine.compute_landed_cost(sample_product, 300, AIR).as_dict()
    for key in (
        "cartons",
        "totalWeightKg",
        "shippingCostUSD",
        "dutiesAmountUSD",
        "setupCostUSD",
        "landedCostPerUnitUSD",
        "unitPriceUSD",
        "unitPriceSettlement",
        "totalPriceSettlement",
        "totalGrossProfitSettlement",
        "exchangeRateUsed",
        "effectiveProfitMarginPercent",
    ):
        assert key in d
    assert d["unitPriceSettlement"] == "3.69"
    assert d["shippingMethod"] == "AIR_EXPRESS"


def test_compute_all_pricing_runs_every_method(engine, catalog):
    all_pricing = engine.compute_all_pricing(catalog["P-100"], 300)

    assert list(all_pricing.by_method) == [AIR, SEA]
    assert all_pricing.product_name == "Branded pens"
    assert all_pricing["DHL"] == engine.compute_landed_cost(catalog["P-100"], 300, AIR)
    assert all_pricing[SEA].total_price_settlement == D("1079.29")


def test_module_level_functions_accept_config(config, sample_product):
    r = compute_landed_cost(sample_product, 300, AIR, config=config)
    assert r.unit_price_settlement == D("3.69")

    assert set(compute_all_pricing(sample_product, 300, config=config).by_method) == {AIR, SEA}


def test_deterministic_across_calls_and_threads(engine, sample_product):
    first = engine.compute_landed_cost(sample_product, 257, SEA)
    assert engine.compute_landed_cost(sample_product, 257, SEA) == first

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: engine.compute_landed_cost(sample_product, 257, SEA), range(64)))
    assert all(r == first for r in results)


def test_product_spec_is_read_only(sample_product):
    with pytest.raises(Exception):
        sample_product.unit_cost_usd = D("9.99")  # type: ignore[misc]
    assert isinstance(sample_product, ProductCostSpec)
