# app/pricing/engine.py
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from .config import PricingConfig, ShippingMethod, get_pricing_config
from .errors import ArithmeticDegenerate
from .models import AllPricing, CatalogProduct, PricingResult, ProductCostSpec
from .money import D, HUNDRED, ZERO, qmoney, to_decimal


class LandedCostEngine:
    """
    Landed-cost pricing engine: product cost structure + quantity + shipping
    method -> unit price, total price and gross profit in the settlement currency.

    Pure and stateless apart from the (immutable) PricingConfig: no I/O, no
    caching, safe to call from any thread or task. Callers validate products
    first (see validation.require_valid_product); this path only fails fast on
    degenerate arithmetic.
    """

    def __init__(self, config: Optional[PricingConfig] = None):
        self.config = config if config is not None else get_pricing_config()

    # ----------------------------
    # Shipping
    # ----------------------------
    def compute_shipping_cost(self, total_weight_kg: Any, shipping_method: Any) -> D:
        """Weight x rate per kg, never billed below the method's minimum charge (USD)."""
        rate = self.config.rate_for(shipping_method)

        weight = to_decimal(total_weight_kg)
        if weight is None:
            raise ArithmeticDegenerate(
                "total_weight_kg", total_weight_kg, "total_weight_kg must be a number"
            )

        cost = weight * rate.rate_per_kg_usd
        return max(cost, rate.minimum_charge_usd)

    # ----------------------------
    # Landed cost
    # ----------------------------
    def compute_landed_cost(self, product: Any, quantity: int, shipping_method: Any) -> PricingResult:
        method = ShippingMethod.parse(shipping_method)
        spec = _cost_spec(product)
        qty = _positive_quantity(quantity)

        if spec.case_pack_size <= 0:
            raise ArithmeticDegenerate("case_pack_size", spec.case_pack_size)

        # 1-2. partial cartons round up; freight is always per full carton
        cartons = -(-qty // spec.case_pack_size)
        total_weight_kg = cartons * spec.carton_weight_kg

        # 3-5
        shipping_cost_usd = self.compute_shipping_cost(total_weight_kg, method)
        duties_amount_usd = spec.unit_cost_usd * (spec.duties_percent / HUNDRED)
        setup_cost_usd = spec.setup_cost_usd

        # 6. shipping + setup amortized over the ordered quantity
        landed_cost_per_unit_usd = (
            spec.unit_cost_usd
            + duties_amount_usd
            + (shipping_cost_usd / qty)
            + (setup_cost_usd / qty)
        )

        # 7. override wint alleen als > 0; 0 of leeg -> standaardmarge
        if spec.profit_override_percent > ZERO:
            effective_margin = spec.profit_override_percent
        else:
            effective_margin = spec.profit_margin_percent

        # 8-10. alles in USD tot de valutaconversie, daarna pas afronden
        fx = self.config.exchange_rate
        unit_price_usd = landed_cost_per_unit_usd * (1 + effective_margin / HUNDRED)
        unit_price_settlement = unit_price_usd * fx
        total_price_settlement = unit_price_settlement * qty

        # 11-12. gross profit baseline excludes shipping and setup (pass-through)
        total_cost_settlement = (spec.unit_cost_usd + duties_amount_usd) * fx * qty
        total_gross_profit_settlement = total_price_settlement - total_cost_settlement

        return PricingResult(
            shipping_method=method,
            quantity=qty,
            cartons=cartons,
            total_weight_kg=total_weight_kg,
            shipping_cost_usd=shipping_cost_usd,
            duties_amount_usd=duties_amount_usd,
            setup_cost_usd=setup_cost_usd,
            landed_cost_per_unit_usd=landed_cost_per_unit_usd,
            unit_price_usd=unit_price_usd,
            unit_price_settlement=qmoney(unit_price_settlement),
            total_price_settlement=qmoney(total_price_settlement),
            total_gross_profit_settlement=qmoney(total_gross_profit_settlement),
            exchange_rate_used=fx,
            effective_profit_margin_percent=effective_margin,
            profit_override_percent=spec.profit_override_percent,
        )

    def compute_all_pricing(self, product: Any, quantity: int) -> AllPricing:
        """One independent compute_landed_cost per configured shipping method."""
        by_method: Dict[ShippingMethod, PricingResult] = {
            m: self.compute_landed_cost(product, quantity, m) for m in self.config.methods
        }
        return AllPricing(quantity=quantity, by_method=by_method, product_name=_product_name(product))


# ----------------------------
# Helpers
# ----------------------------
def _cost_spec(product: Any) -> ProductCostSpec:
    if isinstance(product, ProductCostSpec):
        return product
    if isinstance(product, CatalogProduct):
        return product.cost
    if isinstance(product, Mapping):
        return ProductCostSpec.coerce(product)
    raise TypeError(f"Unsupported product type: {type(product).__name__}")


def _product_name(product: Any) -> Optional[str]:
    if isinstance(product, CatalogProduct):
        return product.name
    if isinstance(product, Mapping) and product.get("name") is not None:
        return str(product["name"])
    return None


def _positive_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ArithmeticDegenerate("quantity", quantity)
    if quantity <= 0:
        raise ArithmeticDegenerate("quantity", quantity)
    return quantity


# ----------------------------
# Module-level API (default config unless one is passed)
# ----------------------------
def compute_shipping_cost(
    total_weight_kg: Any, shipping_method: Any, config: Optional[PricingConfig] = None
) -> D:
    return LandedCostEngine(config).compute_shipping_cost(total_weight_kg, shipping_method)


def compute_landed_cost(
    product: Any, quantity: int, shipping_method: Any, config: Optional[PricingConfig] = None
) -> PricingResult:
    return LandedCostEngine(config).compute_landed_cost(product, quantity, shipping_method)


def compute_all_pricing(product: Any, quantity: int, config: Optional[PricingConfig] = None) -> AllPricing:
    return LandedCostEngine(config).compute_all_pricing(product, quantity)
