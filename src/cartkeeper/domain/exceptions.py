"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so request handlers and the CLI can catch them uniformly.  The subclasses
carry the offending identifiers so callers can tell the user *which*
product or order is the problem.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStock(ValidationError):
    """Requested quantity exceeds what the ledger has available."""

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product '{product_id}' "
            f"(need {requested}, have {available} available)"
        )


class ItemUnavailable(EntityNotFoundError):
    """A product in the cart no longer exists in the catalog."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product '{product_id}' is no longer available")


class EmptyCart(ValidationError):
    """Checkout was attempted with nothing in the cart."""

    def __init__(self, owner_id: str) -> None:
        self.owner_id = owner_id
        super().__init__("Cart is empty")


class AlreadyTerminal(ValidationError):
    """The order is delivered or cancelled and cannot change any more."""

    def __init__(self, order_id: str, status: str) -> None:
        self.order_id = order_id
        self.status = status
        super().__init__(f"Order {order_id} is already {status}")


class ConcurrentUpdate(DomainException):
    """The stored record changed after it was read; re-read and retry."""

    def __init__(self, entity: str, key: str, expected: int, found: int) -> None:
        self.entity = entity
        self.key = key
        self.expected = expected
        self.found = found
        super().__init__(
            f"{entity} '{key}' was modified concurrently "
            f"(expected version {expected}, found {found})"
        )
