# app/pricing/errors.py
from __future__ import annotations

from typing import Any, Iterable, List, Optional


class PricingError(ValueError):
    """
    Base class for all pricing errors.
    Nooit transient: altijd een input- of programmeerfout, dus geen retries.
    """

    code: str = "PRICING_ERROR"

    def __init__(self, message: str, meta: Optional[dict] = None):
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(f"{self.code}: {self.message}")


class InvalidShippingMethod(PricingError):
    code = "INVALID_SHIPPING_METHOD"

    def __init__(self, method: Any, available: Iterable[str] = ()):
        self.method = method
        self.available = list(available)
        super().__init__(
            f"Invalid shipping method: {method!r}. Available: {self.available}",
            {"method": str(method), "available": self.available},
        )


class InvalidProductSpec(PricingError):
    """Carries every violated constraint, in check order (not just the first)."""

    code = "INVALID_PRODUCT_SPEC"

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid product data", {"errors": self.errors})


class ArithmeticDegenerate(PricingError):
    """quantity <= 0 or case pack <= 0 handed to the unvalidated compute path."""

    code = "ARITHMETIC_DEGENERATE"

    def __init__(self, field: str, value: Any, message: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(
            message or f"{field} must be a positive integer, got {value!r}",
            {"field": field, "value": str(value)},
        )


class ProductNotFound(PricingError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = str(product_id)
        super().__init__(f"Product not found: {self.product_id}", {"product_id": self.product_id})


class PricingConfigError(PricingError):
    """Raised when the rate table cannot be loaded or fails validation."""

    code = "PRICING_CONFIG_ERROR"
