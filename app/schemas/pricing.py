# app/schemas/pricing.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, constr, field_validator

from app.pricing.config import ShippingMethod


# ----------------------------
# Requests
# ----------------------------
class QuoteItemV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: constr(strip_whitespace=True, min_length=1)  # type: ignore
    quantity: PositiveInt
    shipping_method: ShippingMethod

    @field_validator("shipping_method", mode="before")
    @classmethod
    def _parse_method(cls, v: Any) -> ShippingMethod:
        # ook legacy "DHL" / "SEA"
        return ShippingMethod.parse(v)


class QuoteCalculateRequestV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    items: List[QuoteItemV1] = Field(min_length=1)


class BulkPricingItemV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: constr(strip_whitespace=True, min_length=1)  # type: ignore
    quantity: PositiveInt


class BulkPricingRequestV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    products: List[BulkPricingItemV1] = Field(min_length=1)


# ----------------------------
# Responses
# ----------------------------
class ProductRefV1(BaseModel):
    id: str
    name: str
    description: str = ""


class PriceDisplayV1(BaseModel):
    """Display strings, e.g. unit_price='BBD$3.69', lead_time='21 days'."""

    unit_price: str
    total_price: str
    gross_profit: str
    lead_time: Optional[str] = None


class QuoteLineV1(BaseModel):
    product: ProductRefV1
    quantity: int
    shipping_method: ShippingMethod
    pricing: PriceDisplayV1
    details: Dict[str, Any]


class QuoteSummaryV1(BaseModel):
    grand_total: str
    grand_total_profit: str
    grand_total_amount: Decimal
    grand_total_profit_amount: Decimal
    item_count: int


class QuoteCalculationV1(BaseModel):
    items: List[QuoteLineV1]
    summary: QuoteSummaryV1


class BulkPricingLineV1(BaseModel):
    product_id: str
    product: Optional[ProductRefV1] = None
    quantity: Optional[int] = None
    pricing: Dict[str, PriceDisplayV1] = Field(default_factory=dict)
    error: Optional[str] = None


class BulkPricingResultV1(BaseModel):
    results: List[BulkPricingLineV1]


class PricingSummaryV1(BaseModel):
    product_name: str
    quantity: int
    pricing: Dict[str, PriceDisplayV1]
    details: Dict[str, Any]
