# app/pricing/config.py
from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

import yaml
from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate

from app.core.logging_config import logger
from app.core.settings import settings

from .errors import InvalidShippingMethod, PricingConfigError
from .money import D, ZERO, to_decimal

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_RATES_FILE = PACKAGE_DIR / "rules" / "shipping_rates.yaml"
CONFIG_SCHEMA_FILE = PACKAGE_DIR / "schemas" / "pricing_config.schema.json"


class ShippingMethod(str, Enum):
    AIR_EXPRESS = "AIR_EXPRESS"
    SEA_FREIGHT = "SEA_FREIGHT"

    @classmethod
    def parse(cls, value: Any) -> "ShippingMethod":
        """Accepts a member, its value/name (any case) or the legacy DHL / SEA names."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
            if key in _LEGACY_METHOD_NAMES:
                return _LEGACY_METHOD_NAMES[key]
        raise InvalidShippingMethod(value, [m.value for m in cls])


_LEGACY_METHOD_NAMES: Dict[str, ShippingMethod] = {
    "DHL": ShippingMethod.AIR_EXPRESS,
    "SEA": ShippingMethod.SEA_FREIGHT,
}


@dataclass(frozen=True)
class ShippingRate:
    rate_per_kg_usd: D
    minimum_charge_usd: D


@dataclass(frozen=True)
class PricingConfig:
    """
    Static pricing configuration: shipping rate table + USD -> settlement rate.
    Immutable after load; override by building a new one (e.g. with_exchange_rate).
    """

    rates: Mapping[ShippingMethod, ShippingRate]
    exchange_rate: D
    currency: str = "BBD"
    currency_symbol: str = "BBD$"
    version: str = "v1"
    source: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # read-only view, so nobody can patch the table at runtime
        object.__setattr__(self, "rates", MappingProxyType(dict(self.rates)))

    @property
    def methods(self) -> list[ShippingMethod]:
        """Configured methods in declaration order of ShippingMethod."""
        return [m for m in ShippingMethod if m in self.rates]

    def rate_for(self, method: Any) -> ShippingRate:
        parsed = ShippingMethod.parse(method)
        try:
            return self.rates[parsed]
        except KeyError:
            raise InvalidShippingMethod(method, [m.value for m in self.methods]) from None

    def with_exchange_rate(self, exchange_rate: Any) -> "PricingConfig":
        rate = to_decimal(exchange_rate)
        if rate is None or rate <= ZERO:
            raise PricingConfigError(f"exchangeRate must be > 0, got {exchange_rate!r}")
        return replace(self, exchange_rate=rate)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "shippingRates": {
                m.value: {
                    "ratePerKgUSD": str(self.rates[m].rate_per_kg_usd),
                    "minimumChargeUSD": str(self.rates[m].minimum_charge_usd),
                    "currency": "USD",
                }
                for m in self.methods
            },
            "exchangeRate": str(self.exchange_rate),
            "currency": self.currency,
            "currencySymbol": self.currency_symbol,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any], *, source: str | None = None) -> "PricingConfig":
        raw_rates = d.get("shippingRates") or {}
        if not raw_rates:
            raise PricingConfigError("shippingRates must contain at least one method.")

        rates: Dict[ShippingMethod, ShippingRate] = {}
        for name, r in raw_rates.items():
            try:
                method = ShippingMethod.parse(name)
            except InvalidShippingMethod as e:
                raise PricingConfigError(f"Unknown shipping method in config: {name!r}") from e
            if method in rates:
                raise PricingConfigError(f"Duplicate shipping method in config: {method.value}")

            per_kg = to_decimal((r or {}).get("ratePerKgUSD"))
            minimum = to_decimal((r or {}).get("minimumChargeUSD"))
            if per_kg is None or per_kg < ZERO:
                raise PricingConfigError(f"{method.value}: ratePerKgUSD must be >= 0")
            if minimum is None or minimum < ZERO:
                raise PricingConfigError(f"{method.value}: minimumChargeUSD must be >= 0")
            rates[method] = ShippingRate(rate_per_kg_usd=per_kg, minimum_charge_usd=minimum)

        exchange_rate = to_decimal(d.get("exchangeRate"))
        if exchange_rate is None or exchange_rate <= ZERO:
            raise PricingConfigError("exchangeRate must be > 0")

        return PricingConfig(
            rates=rates,
            exchange_rate=exchange_rate,
            currency=str(d.get("currency") or "BBD"),
            currency_symbol=str(d.get("currencySymbol") or f"{d.get('currency') or 'BBD'}$"),
            version=str(d.get("version") or "v1"),
            source=source,
        )


def _load_schema() -> Dict[str, Any]:
    with CONFIG_SCHEMA_FILE.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_pricing_config(path: str | Path) -> PricingConfig:
    """Load a rate table from YAML and validate it against the config schema."""
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            d = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise PricingConfigError(f"Could not load pricing config: {e}") from e

    try:
        validate(instance=d, schema=_load_schema())
    except SchemaValidationError as e:
        raise PricingConfigError(f"{config_path}: {e.message}") from e

    cfg = PricingConfig.from_dict(d, source=str(config_path))
    logger.info(
        "pricing_config_loaded",
        path=str(config_path),
        methods=[m.value for m in cfg.methods],
        exchange_rate=str(cfg.exchange_rate),
        currency=cfg.currency,
    )
    return cfg


@lru_cache(maxsize=1)
def get_pricing_config() -> PricingConfig:
    """Process-wide default config: loaded once, env overrides applied on top."""
    cfg = load_pricing_config(settings.PRICING_RATES_FILE or DEFAULT_RATES_FILE)

    if settings.PRICING_EXCHANGE_RATE is not None:
        cfg = cfg.with_exchange_rate(settings.PRICING_EXCHANGE_RATE)
    if settings.PRICING_CURRENCY:
        cfg = replace(
            cfg,
            currency=settings.PRICING_CURRENCY,
            currency_symbol=settings.PRICING_CURRENCY_SYMBOL or f"{settings.PRICING_CURRENCY}$",
        )
    elif settings.PRICING_CURRENCY_SYMBOL:
        cfg = replace(cfg, currency_symbol=settings.PRICING_CURRENCY_SYMBOL)
    return cfg


def reset_pricing_config_cache() -> None:
    get_pricing_config.cache_clear()
