# app/pricing/quotes.py
"""
Quote-level operations on top of the landed-cost engine.

- pricing_summary: validated per-product comparison of all shipping methods
- calculate_quote: multi-line quote, each line with its own shipping method
- bulk_pricing: every product priced for every method; missing products
  become error entries instead of failing the whole batch
- describe_config: read-only view of the active rate table

Product lookup is a plain read-only mapping product_id -> CatalogProduct;
persistence stays with the caller.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from app.core.logging_config import logger
from app.schemas.pricing import (
    BulkPricingLineV1,
    BulkPricingRequestV1,
    BulkPricingResultV1,
    PriceDisplayV1,
    PricingSummaryV1,
    ProductRefV1,
    QuoteCalculateRequestV1,
    QuoteCalculationV1,
    QuoteLineV1,
    QuoteSummaryV1,
)

from .config import PricingConfig, get_pricing_config
from .engine import LandedCostEngine
from .errors import InvalidProductSpec, ProductNotFound
from .models import CatalogProduct, PricingResult
from .money import ZERO, format_money
from .validation import validate_product_cost_spec

Catalog = Mapping[str, CatalogProduct]


def _display(result: PricingResult, symbol: str, lead_time: Optional[str] = None) -> PriceDisplayV1:
    return PriceDisplayV1(
        unit_price=format_money(result.unit_price_settlement, symbol),
        total_price=format_money(result.total_price_settlement, symbol),
        gross_profit=format_money(result.total_gross_profit_settlement, symbol),
        lead_time=lead_time,
    )


def _product_ref(product: CatalogProduct) -> ProductRefV1:
    return ProductRefV1(id=product.product_id, name=product.name, description=product.description)


def _lookup(catalog: Catalog, product_id: str) -> CatalogProduct:
    product = catalog.get(product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


def pricing_summary(
    product: CatalogProduct, quantity: int, engine: Optional[LandedCostEngine] = None
) -> PricingSummaryV1:
    """Validate first, then compare all shipping methods for one product."""
    engine = engine or LandedCostEngine()

    validation = validate_product_cost_spec(product)
    if not validation.valid:
        logger.bind(product_id=product.product_id, errors=validation.errors).warning(
            "pricing_summary_rejected"
        )
        raise InvalidProductSpec(validation.errors)

    pricing = engine.compute_all_pricing(product, quantity)
    symbol = engine.config.currency_symbol

    return PricingSummaryV1(
        product_name=product.name,
        quantity=quantity,
        pricing={
            m.value: _display(r, symbol, product.lead_time) for m, r in pricing.by_method.items()
        },
        details={m.value: r.as_dict() for m, r in pricing.by_method.items()},
    )


def calculate_quote(
    request: QuoteCalculateRequestV1, catalog: Catalog, engine: Optional[LandedCostEngine] = None
) -> QuoteCalculationV1:
    """
    Price every line with its own shipping method.
    Eerste onbekende product_id -> ProductNotFound (hele quote faalt).
    """
    engine = engine or LandedCostEngine()
    symbol = engine.config.currency_symbol

    lines: List[QuoteLineV1] = []
    grand_total = ZERO
    grand_total_profit = ZERO

    for item in request.items:
        try:
            product = _lookup(catalog, item.product_id)
        except ProductNotFound:
            logger.bind(product_id=item.product_id).warning("product_not_found")
            raise

        result = engine.compute_landed_cost(product, item.quantity, item.shipping_method)

        lines.append(
            QuoteLineV1(
                product=_product_ref(product),
                quantity=item.quantity,
                shipping_method=item.shipping_method,
                pricing=_display(result, symbol, product.lead_time),
                details=result.as_dict(),
            )
        )
        # totalen over de al afgeronde regelbedragen
        grand_total += result.total_price_settlement
        grand_total_profit += result.total_gross_profit_settlement

    logger.bind(
        line_count=len(lines),
        grand_total=str(grand_total),
        currency=engine.config.currency,
    ).info("quote_calculated")

    return QuoteCalculationV1(
        items=lines,
        summary=QuoteSummaryV1(
            grand_total=format_money(grand_total, symbol),
            grand_total_profit=format_money(grand_total_profit, symbol),
            grand_total_amount=grand_total,
            grand_total_profit_amount=grand_total_profit,
            item_count=len(lines),
        ),
    )


def bulk_pricing(
    request: BulkPricingRequestV1, catalog: Catalog, engine: Optional[LandedCostEngine] = None
) -> BulkPricingResultV1:
    engine = engine or LandedCostEngine()
    symbol = engine.config.currency_symbol

    results: List[BulkPricingLineV1] = []
    missing = 0

    for item in request.products:
        product = catalog.get(item.product_id)
        if product is None:
            missing += 1
            results.append(BulkPricingLineV1(product_id=item.product_id, error="Product not found"))
            continue

        pricing = engine.compute_all_pricing(product, item.quantity)
        results.append(
            BulkPricingLineV1(
                product_id=item.product_id,
                product=_product_ref(product),
                quantity=item.quantity,
                pricing={m.value: _display(r, symbol) for m, r in pricing.by_method.items()},
            )
        )

    logger.bind(product_count=len(results), missing=missing).info("bulk_pricing_calculated")
    return BulkPricingResultV1(results=results)


def describe_config(config: Optional[PricingConfig] = None) -> Dict[str, Any]:
    return (config or get_pricing_config()).as_dict()
