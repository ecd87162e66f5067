"""Domain service: checkout pricing.

Shipping is a flat fee waived above a subtotal threshold. Tax is an
extension point: the default policy charges nothing and the cart view
shows it as "calculated at checkout".
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.model.value_objects import Money

FREE_SHIPPING_THRESHOLD = Decimal("50.00")
FLAT_SHIPPING_FEE = Decimal("5.99")


@dataclass(frozen=True)
class ShippingPolicy:
    free_threshold: Money = Money(FREE_SHIPPING_THRESHOLD)
    flat_fee: Money = Money(FLAT_SHIPPING_FEE)

    def fee_for(self, subtotal: Money) -> Money:
        """Zero when the subtotal is strictly above the threshold."""
        if subtotal > self.free_threshold:
            return Money.zero(subtotal.currency)
        return self.flat_fee


class TaxPolicy(ABC):

    @abstractmethod
    def tax_for(self, subtotal: Money) -> Money:
        """Return the tax owed on ``subtotal``."""


class NoTaxPolicy(TaxPolicy):

    def tax_for(self, subtotal: Money) -> Money:
        return Money.zero(subtotal.currency)


@dataclass(frozen=True)
class CheckoutQuote:
    subtotal: Money
    shipping: Money
    tax: Money

    @property
    def total(self) -> Money:
        return self.subtotal + self.shipping + self.tax


class CheckoutPricing:

    def __init__(
        self,
        shipping_policy: ShippingPolicy | None = None,
        tax_policy: TaxPolicy | None = None,
    ) -> None:
        self.shipping_policy = shipping_policy or ShippingPolicy()
        self.tax_policy = tax_policy or NoTaxPolicy()

    def quote(self, subtotal: Money) -> CheckoutQuote:
        return CheckoutQuote(
            subtotal=subtotal,
            shipping=self.shipping_policy.fee_for(subtotal),
            tax=self.tax_policy.tax_for(subtotal),
        )
