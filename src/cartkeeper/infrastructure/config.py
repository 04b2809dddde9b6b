"""Runtime configuration read from the environment.

The domain never reads the environment itself; ``bootstrap`` turns a
Settings object into repositories and a PricingPolicy.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

from cartkeeper.domain.model.value_objects import Money
from cartkeeper.domain.service.pricing import PricingPolicy

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigurationError(Exception):
    """An environment variable holds a value that cannot be used."""


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    tax_rate: Decimal = Decimal("0.10")
    free_shipping_threshold: Decimal = Decimal("100")
    flat_shipping: Decimal = Decimal("10")
    order_prefix: str = "WM"
    log_level: str = "INFO"
    log_json: bool = False

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = Settings()
        return Settings(
            data_dir=Path(env.get("CARTKEEPER_DATA_DIR", defaults.data_dir)),
            tax_rate=_decimal(env, "CARTKEEPER_TAX_RATE", defaults.tax_rate),
            free_shipping_threshold=_decimal(
                env, "CARTKEEPER_FREE_SHIPPING_THRESHOLD", defaults.free_shipping_threshold
            ),
            flat_shipping=_decimal(env, "CARTKEEPER_FLAT_SHIPPING", defaults.flat_shipping),
            order_prefix=env.get("CARTKEEPER_ORDER_PREFIX", defaults.order_prefix).strip()
            or defaults.order_prefix,
            log_level=env.get("CARTKEEPER_LOG_LEVEL", defaults.log_level).upper(),
            log_json=env.get("CARTKEEPER_LOG_JSON", "").strip().lower() in _TRUTHY,
        )

    def pricing_policy(self) -> PricingPolicy:
        return PricingPolicy(
            tax_rate=self.tax_rate,
            free_shipping_threshold=Money(self.free_shipping_threshold),
            flat_shipping=Money(self.flat_shipping),
        )


def _decimal(env: Mapping[str, str], name: str, default: Decimal) -> Decimal:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}") from None
    if value < 0:
        raise ConfigurationError(f"{name} cannot be negative, got {raw!r}")
    return value
