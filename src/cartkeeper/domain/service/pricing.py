"""Domain service: Pricing Calculator.

One pure function shared by the cart view and the checkout, so the
displayed total and the persisted order total can never drift apart.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from cartkeeper.domain.exceptions import ValidationError
from cartkeeper.domain.model.value_objects import Money, PriceBreakdown


@dataclass(frozen=True)
class PricingPolicy:
    """Tax and shipping rules.

    Shipping is free when the subtotal is strictly greater than
    ``free_shipping_threshold``; otherwise ``flat_shipping`` applies.
    """

    tax_rate: Decimal = Decimal("0.10")
    free_shipping_threshold: Money = Money(Decimal("100"))
    flat_shipping: Money = Money(Decimal("10"))

    def __post_init__(self) -> None:
        if self.tax_rate < Decimal("0"):
            raise ValidationError("Tax rate cannot be negative")


DEFAULT_POLICY = PricingPolicy()


def compute_totals(
    lines: Iterable[tuple[Money, int]],
    policy: PricingPolicy = DEFAULT_POLICY,
) -> PriceBreakdown:
    """Price a set of ``(unit_price, quantity)`` lines.

    An empty set of lines costs nothing, shipping included.
    """
    subtotal: Money | None = None
    for unit_price, quantity in lines:
        line_total = unit_price * quantity
        subtotal = line_total if subtotal is None else subtotal + line_total

    if subtotal is None:
        return PriceBreakdown.empty(policy.flat_shipping.currency)

    currency = subtotal.currency
    tax = (subtotal * policy.tax_rate).quantize()
    if subtotal > policy.free_shipping_threshold:
        shipping = Money.zero(currency)
    else:
        shipping = policy.flat_shipping
    discount = Money.zero(currency)
    total = subtotal + tax + shipping - discount

    return PriceBreakdown(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        discount=discount,
        total=total,
    )
