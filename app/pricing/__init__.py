from .config import (
    PricingConfig,
    ShippingMethod,
    ShippingRate,
    get_pricing_config,
    load_pricing_config,
)
from .engine import (
    LandedCostEngine,
    compute_all_pricing,
    compute_landed_cost,
    compute_shipping_cost,
)
from .errors import (
    ArithmeticDegenerate,
    InvalidProductSpec,
    InvalidShippingMethod,
    PricingConfigError,
    PricingError,
    ProductNotFound,
)
from .models import AllPricing, CatalogProduct, PricingResult, ProductCostSpec
from .validation import ValidationResult, require_valid_product, validate_product_cost_spec

__all__ = [
    "PricingConfig",
    "ShippingMethod",
    "ShippingRate",
    "get_pricing_config",
    "load_pricing_config",
    "LandedCostEngine",
    "compute_all_pricing",
    "compute_landed_cost",
    "compute_shipping_cost",
    "ArithmeticDegenerate",
    "InvalidProductSpec",
    "InvalidShippingMethod",
    "PricingConfigError",
    "PricingError",
    "ProductNotFound",
    "AllPricing",
    "CatalogProduct",
    "PricingResult",
    "ProductCostSpec",
    "ValidationResult",
    "require_valid_product",
    "validate_product_cost_spec",
]
