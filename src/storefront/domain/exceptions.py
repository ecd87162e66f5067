"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """Requested quantity exceeds the live stock of a physical product."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for {product_name} "
            f"(requested {requested}, available {available})"
        )


class EmptyCartError(DomainException):
    """Checkout was attempted with no line items in the cart."""


class UnauthenticatedError(DomainException):
    """The operation requires a signed-in identity."""


class StoreUnavailableError(DomainException):
    """A backing store could not be read or written."""


class ConcurrencyConflictError(DomainException):
    """A write was based on a stale version. Reload and retry."""


class InvalidStatusTransitionError(DomainException):
    """An order status change is not allowed from the current status."""
