"""Value Objects shared across the storefront domain.

Prices, subtotals and fees are all ``Money``; cart and order line
quantities are ``Quantity``. Both are immutable and validate on
construction, so an invalid price or a zero-unit line cannot exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal(100)

_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


@dataclass(frozen=True)
class Money:
    """A non-negative amount in a single ISO currency.

    Amounts are Decimal end to end. Only ``percent_off`` rounds (to whole
    cents, half up), since that is where a fractional cent can appear.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Invalid money amount: {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Amount cannot be negative, got {self.amount}")
        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError(f"Unknown currency code '{self.currency}'")

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, units: int) -> Money:
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money can only be multiplied by a unit count, got {units!r}")
        return Money(self.amount * units, self.currency)

    def __gt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def percent_off(self, percent: int) -> Money:
        """Price after a ``percent`` discount: ``amount - amount * percent / 100``."""
        discounted = self.amount - self.amount * Decimal(percent) / HUNDRED
        return Money(discounted, self.currency).quantized()

    def quantized(self) -> Money:
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    @property
    def is_zero(self) -> bool:
        return not self.amount

    def __str__(self) -> str:
        symbol = _SYMBOLS.get(self.currency)
        if symbol is None:
            return f"{self.amount:.2f} {self.currency}"
        return f"{symbol}{self.amount:.2f}"

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} and {other.currency} amounts"
            )

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = "USD") -> Money:
        """Parse user or document input such as ``"15.00"``."""
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return Money(value, currency)

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)


@dataclass(frozen=True)
class Quantity:
    """Units of one product on a cart or order line (always >= 1)."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)
