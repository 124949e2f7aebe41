# app/pricing/validation.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping

from .errors import InvalidProductSpec
from .models import PRODUCT_FIELD_ALIASES, CatalogProduct, ProductCostSpec, read_product_field
from .money import D, ZERO, to_decimal


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    code: str
    message: str


@dataclass
class ValidationResult:
    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[str]:
        return [i.message for i in self.issues]


# (field, predicate, code, message); fouten komen in deze volgorde terug
_CHECKS: List[tuple[str, Callable[[D], bool], str, str]] = [
    (
        "case_pack_size",
        lambda v: v > ZERO and v == v.to_integral_value(),
        "CASE_PACK_INVALID",
        "Case pack size must be a whole number greater than 0",
    ),
    ("carton_weight_kg", lambda v: v > ZERO, "CARTON_WEIGHT_INVALID", "Carton weight must be greater than 0"),
    ("unit_cost_usd", lambda v: v > ZERO, "UNIT_COST_INVALID", "Unit cost must be greater than 0"),
    ("duties_percent", lambda v: v >= ZERO, "DUTIES_INVALID", "Duties must be 0 or greater"),
    ("profit_margin_percent", lambda v: v >= ZERO, "PROFIT_MARGIN_INVALID", "Profit margin must be 0 or greater"),
]


def _reader(product: Any) -> Callable[[str], Any]:
    if isinstance(product, CatalogProduct):
        product = product.cost
    if isinstance(product, ProductCostSpec):
        return lambda attr: getattr(product, attr)
    if isinstance(product, Mapping):
        return lambda attr: read_product_field(product, attr)
    return lambda attr: getattr(product, attr, None)


def validate_product_cost_spec(product: Any) -> ValidationResult:
    """
    Check every required cost field and collect ALL violations (not fail-fast).
    Missing, None or non-numeric values fail their check.
    """
    read = _reader(product)
    issues: List[ValidationIssue] = []

    for attr, ok, code, message in _CHECKS:
        value = to_decimal(read(attr))
        if value is None or not ok(value):
            issues.append(ValidationIssue(field=attr, code=code, message=message))

    return ValidationResult(valid=not issues, issues=issues)


def require_valid_product(product: Any) -> ProductCostSpec:
    """Validating entry point: returns the cost spec or raises InvalidProductSpec."""
    result = validate_product_cost_spec(product)
    if not result.valid:
        raise InvalidProductSpec(result.errors)

    if isinstance(product, CatalogProduct):
        return product.cost
    if isinstance(product, ProductCostSpec):
        return product
    if not isinstance(product, Mapping):
        product = {attr: getattr(product, attr, None) for attr in set(PRODUCT_FIELD_ALIASES.values())}
    return ProductCostSpec.coerce(product)
