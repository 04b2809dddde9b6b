"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Repositories are
cached so every handler in the process shares the same per-key locks.
"""

from __future__ import annotations

from functools import lru_cache

from cartkeeper.domain.service.pricing import PricingPolicy
from cartkeeper.infrastructure.config import Settings
from cartkeeper.infrastructure.persistence.json_cart_repository import JsonCartRepository
from cartkeeper.infrastructure.persistence.json_checkout_journal import JsonCheckoutJournal
from cartkeeper.infrastructure.persistence.json_inventory_repository import (
    JsonInventoryRepository,
)
from cartkeeper.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from cartkeeper.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


@lru_cache(maxsize=1)
def settings() -> Settings:
    return Settings.from_env()


def pricing_policy() -> PricingPolicy:
    return settings().pricing_policy()


@lru_cache(maxsize=1)
def product_repository() -> JsonProductRepository:
    return JsonProductRepository(settings().data_dir / "products.json")


@lru_cache(maxsize=1)
def inventory_repository() -> JsonInventoryRepository:
    return JsonInventoryRepository(settings().data_dir / "inventory.json")


@lru_cache(maxsize=1)
def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(settings().data_dir / "carts.json")


@lru_cache(maxsize=1)
def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(
        settings().data_dir / "orders.json",
        prefix=settings().order_prefix,
    )


@lru_cache(maxsize=1)
def checkout_journal() -> JsonCheckoutJournal:
    return JsonCheckoutJournal(settings().data_dir / "checkouts.json")


def reset() -> None:
    """Forget cached settings and repositories (tests, config reloads)."""
    for factory in (
        settings,
        product_repository,
        inventory_repository,
        cart_repository,
        order_repository,
        checkout_journal,
    ):
        factory.cache_clear()
