#!/usr/bin/env python3
"""
Demo script voor de LandedCostEngine.
Toont hoe de landed-cost berekening werkt voor beide verzendmethodes.
"""

from app.core.logging_config import setup_logging
from app.pricing import (
    InvalidProductSpec,
    LandedCostEngine,
    ProductCostSpec,
    require_valid_product,
)


def main():
    """Demo van de pricing engine functionaliteit."""
    setup_logging(json_logs=False)

    print("Landed Cost Pricing Engine - Demo")
    print("=" * 50)

    engine = LandedCostEngine()
    cfg = engine.config

    scenarios = [
        {
            "name": "Standaard product, 300 stuks",
            "product": {
                "unitCostUSD": "1.10",
                "casePackSize": 100,
                "cartonWeightKg": "15",
                "dutiesPercent": "20",
                "profitMarginPercent": "30",
            },
            "quantity": 300,
        },
        {
            "name": "Profit override 40% + setup cost, 101 stuks (2 dozen)",
            "product": {
                "unitCostUSD": "2.50",
                "casePackSize": 100,
                "cartonWeightKg": "12.5",
                "dutiesPercent": "10",
                "setupCostUSD": "150",
                "profitMarginPercent": "25",
                "profitOverridePercent": "40",
            },
            "quantity": 101,
        },
        {
            "name": "Zware zending, 5000 stuks",
            "product": {
                "unitCostUSD": "0.80",
                "casePackSize": 50,
                "cartonWeightKg": "22",
                "dutiesPercent": "15",
                "profitMarginPercent": "35",
            },
            "quantity": 5000,
        },
        {
            "name": "Ongeldig product (validatie)",
            "product": {
                "unitCostUSD": "0",
                "casePackSize": 0,
                "cartonWeightKg": "10",
                "dutiesPercent": "-5",
                "profitMarginPercent": "30",
            },
            "quantity": 10,
        },
    ]

    for i, scenario in enumerate(scenarios, 1):
        print(f"\nScenario {i}: {scenario['name']}")
        print("-" * 40)

        try:
            product = require_valid_product(scenario["product"])
        except InvalidProductSpec as e:
            print("Fout: ongeldige productdata")
            for err in e.errors:
                print(f"  - {err}")
            continue

        pricing = engine.compute_all_pricing(product, scenario["quantity"])
        print_product(product, scenario["quantity"])

        for method, result in pricing.by_method.items():
            print(f"\n  {method.value}:")
            print(f"    - Dozen: {result.cartons} ({result.total_weight_kg} kg)")
            print(f"    - Verzending: USD {result.shipping_cost_usd:.2f}")
            print(f"    - Landed cost/stuk: USD {result.landed_cost_per_unit_usd:.4f}")
            print(f"    - Marge: {result.effective_profit_margin_percent}%")
            print(f"    - Stukprijs: {cfg.currency_symbol}{result.unit_price_settlement}")
            print(f"    - Totaalprijs: {cfg.currency_symbol}{result.total_price_settlement}")
            print(f"    - Brutowinst: {cfg.currency_symbol}{result.total_gross_profit_settlement}")

    print("\n" + "=" * 50)
    print(f"Wisselkoers USD -> {cfg.currency}: {cfg.exchange_rate}")


def print_product(product: ProductCostSpec, quantity: int) -> None:
    print("Input:")
    print(f"  - Aantal: {quantity}")
    print(f"  - Kostprijs: USD {product.unit_cost_usd}")
    print(f"  - Doos: {product.case_pack_size} stuks / {product.carton_weight_kg} kg")
    print(f"  - Invoerrechten: {product.duties_percent}%")


if __name__ == "__main__":
    main()
