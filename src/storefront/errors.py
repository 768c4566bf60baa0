"""Typed business failures raised by the storefront core.

Every failure carries a ``kind`` (the category a client branches on), a
``code`` (the specific failure), a human message and the id of the entity
involved, so an API client can render an actionable message without parsing
text. Malformed field values inside aggregates and commands still surface as
Protean's own ``ValidationError``.
"""


class StorefrontError(Exception):
    kind = "Error"

    def __init__(self, message: str, entity_id=None, **details):
        super().__init__(message)
        self.message = message
        self.entity_id = str(entity_id) if entity_id is not None else None
        self.details = details

    @property
    def code(self) -> str:
        return type(self).__name__.removesuffix("Error")

    def to_dict(self) -> dict:
        payload = {
            "kind": self.kind,
            "code": self.code,
            "message": self.message,
            "entity_id": self.entity_id,
        }
        if self.details:
            payload["details"] = self.details
        return payload


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
class NotFoundError(StorefrontError):
    kind = "NotFound"


class NotOwnerError(StorefrontError):
    """The caller has no rights over the entity."""

    kind = "NotOwner"


class InvalidInputError(StorefrontError):
    kind = "ValidationError"


class StateConflictError(StorefrontError):
    """The operation is not valid for the entity's current state."""

    kind = "StateConflict"


class InsufficientFundsError(StorefrontError):
    kind = "InsufficientFunds"


class UnavailableError(StorefrontError):
    """The backing store could not be reached. Never retried inside the core."""

    kind = "Unavailable"

    @classmethod
    def from_exception(cls, exc: Exception) -> "UnavailableError":
        return cls(f"Storage unavailable: {exc.__class__.__name__}", cause=str(exc))


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------
class UserNotFoundError(NotFoundError):
    pass


class ProductNotFoundError(NotFoundError):
    pass


class ShopNotFoundError(NotFoundError):
    pass


class CartLineNotFoundError(NotFoundError):
    pass


class OrderNotFoundError(NotFoundError):
    pass


class ReturnNotFoundError(NotFoundError):
    pass


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
class InvalidAmountError(InvalidInputError):
    pass


class InvalidStatusError(InvalidInputError):
    pass


class EmptyCartError(InvalidInputError):
    pass


class InvalidOrderDataError(InvalidInputError):
    pass


# ---------------------------------------------------------------------------
# State conflicts
# ---------------------------------------------------------------------------
class NotCancellableError(StateConflictError):
    pass


class NotEligibleError(StateConflictError):
    pass


class ReturnWindowExpiredError(StateConflictError):
    pass


class AlreadyResolvedError(StateConflictError):
    pass


class IllegalStatusTransitionError(StateConflictError):
    pass


# ---------------------------------------------------------------------------
# Funds
# ---------------------------------------------------------------------------
class InsufficientBalanceError(InsufficientFundsError):
    """Checkout total exceeds the wallet balance."""
