# app/pricing/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .config import ShippingMethod
from .errors import ArithmeticDegenerate, InvalidProductSpec
from .money import D, ZERO, to_decimal

# external (camelCase) record key -> attribute name
PRODUCT_FIELD_ALIASES: Dict[str, str] = {
    "unitCostUSD": "unit_cost_usd",
    "unitCost": "unit_cost_usd",
    "casePackSize": "case_pack_size",
    "cartonWeightKg": "carton_weight_kg",
    "dutiesPercent": "duties_percent",
    "setupCostUSD": "setup_cost_usd",
    "profitMarginPercent": "profit_margin_percent",
    "profitOverridePercent": "profit_override_percent",
}


_DECIMAL_FIELDS = (
    "unit_cost_usd",
    "carton_weight_kg",
    "duties_percent",
    "profit_margin_percent",
    "setup_cost_usd",
    "profit_override_percent",
)


def read_product_field(record: Mapping[str, Any], attr: str) -> Any:
    """Look a field up by attribute name first, then by any of its camelCase aliases."""
    if attr in record:
        return record[attr]
    for alias, target in PRODUCT_FIELD_ALIASES.items():
        if target == attr and alias in record:
            return record[alias]
    return None


@dataclass(frozen=True)
class ProductCostSpec:
    """Read-only cost view of a product. Money in USD, percentages as 20 = 20%."""

    unit_cost_usd: D
    case_pack_size: int
    carton_weight_kg: D
    duties_percent: D
    profit_margin_percent: D
    setup_cost_usd: D = ZERO
    profit_override_percent: D = ZERO

    def __post_init__(self) -> None:
        # float/int/str -> Decimal, case pack -> int; niet-numeriek blijft staan voor de validator
        for attr in _DECIMAL_FIELDS:
            value = to_decimal(getattr(self, attr))
            if value is not None:
                object.__setattr__(self, attr, value)

        case_pack = to_decimal(self.case_pack_size)
        if case_pack is not None:
            if case_pack != case_pack.to_integral_value():
                raise ArithmeticDegenerate("case_pack_size", self.case_pack_size)
            object.__setattr__(self, "case_pack_size", int(case_pack))

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> "ProductCostSpec":
        """
        Build from a raw record (camelCase or snake_case keys).
        Ontbrekende/ongeldige verplichte velden -> InvalidProductSpec met alle fouten.
        """
        from .validation import validate_product_cost_spec

        result = validate_product_cost_spec(record)
        if not result.valid:
            raise InvalidProductSpec(result.errors)
        return ProductCostSpec.coerce(record)

    @staticmethod
    def coerce(record: Mapping[str, Any]) -> "ProductCostSpec":
        """
        Unvalidated conversion (compute path). Missing optional amounts -> 0.
        Missing required fields raise InvalidProductSpec; bounds are not checked here.
        """

        def num(attr: str, *, required: bool) -> D:
            value = to_decimal(read_product_field(record, attr))
            if value is None:
                if required:
                    raise InvalidProductSpec([f"{attr} is required"])
                return ZERO
            return value

        # __post_init__ zet case pack om naar int (of ArithmeticDegenerate)
        return ProductCostSpec(
            unit_cost_usd=num("unit_cost_usd", required=True),
            case_pack_size=num("case_pack_size", required=True),
            carton_weight_kg=num("carton_weight_kg", required=True),
            duties_percent=num("duties_percent", required=True),
            profit_margin_percent=num("profit_margin_percent", required=True),
            setup_cost_usd=num("setup_cost_usd", required=False),
            profit_override_percent=num("profit_override_percent", required=False),
        )


@dataclass(frozen=True)
class CatalogProduct:
    product_id: str
    name: str
    cost: ProductCostSpec
    description: str = ""
    lead_time_days: Optional[int] = None

    @property
    def lead_time(self) -> str:
        return f"{self.lead_time_days} days" if self.lead_time_days is not None else "n/a"


@dataclass(frozen=True)
class PricingResult:
    """
    Full cost breakdown for one (product, quantity, shipping method).
    USD values unrounded; the three settlement amounts rounded to 2 dp.
    """

    shipping_method: ShippingMethod
    quantity: int
    cartons: int
    total_weight_kg: D
    shipping_cost_usd: D
    duties_amount_usd: D
    setup_cost_usd: D
    landed_cost_per_unit_usd: D
    unit_price_usd: D
    unit_price_settlement: D
    total_price_settlement: D
    total_gross_profit_settlement: D
    exchange_rate_used: D
    effective_profit_margin_percent: D
    profit_override_percent: D = ZERO

    def as_dict(self) -> Dict[str, Any]:
        return {
            "shippingMethod": self.shipping_method.value,
            "quantity": self.quantity,
            "cartons": self.cartons,
            "totalWeightKg": str(self.total_weight_kg),
            "shippingCostUSD": str(self.shipping_cost_usd),
            "dutiesAmountUSD": str(self.duties_amount_usd),
            "setupCostUSD": str(self.setup_cost_usd),
            "landedCostPerUnitUSD": str(self.landed_cost_per_unit_usd),
            "unitPriceUSD": str(self.unit_price_usd),
            "unitPriceSettlement": str(self.unit_price_settlement),
            "totalPriceSettlement": str(self.total_price_settlement),
            "totalGrossProfitSettlement": str(self.total_gross_profit_settlement),
            "exchangeRateUsed": str(self.exchange_rate_used),
            "effectiveProfitMarginPercent": str(self.effective_profit_margin_percent),
            "profitOverridePercent": str(self.profit_override_percent),
        }


@dataclass(frozen=True)
class AllPricing:
    quantity: int
    by_method: Mapping[ShippingMethod, PricingResult] = field(default_factory=dict)
    product_name: Optional[str] = None

    def __getitem__(self, method: Any) -> PricingResult:
        return self.by_method[ShippingMethod.parse(method)]
