"""Order aggregate (CQRS) — one purchased cart line and its escrowed payment.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED → COMPLETED
    PENDING → CANCELLED (refund price × quantity)
    DELIVERED → RETURNED (through an approved return)

The price is copied from the catalogue at checkout and never re-read. The
``paid`` flag is the escrow: funds leave the buyer's wallet at checkout but
only count as paid once the order reaches DELIVERED.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import (
    IllegalStatusTransitionError,
    InvalidStatusError,
    NotCancellableError,
    NotEligibleError,
    OrderNotFoundError,
    ReturnWindowExpiredError,
)
from storefront.order.events import (
    EscrowReleased,
    OrderCancelled,
    OrderPlaced,
    OrderReturned,
    OrderStatusChanged,
)
from storefront.utils.money import money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RETURNED = "returned"


# Forward progression driven by the operator
_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.COMPLETED,
]

# Values the operator may request; RETURNED is only reached through a return
ADMIN_STATUSES = frozenset(_PROGRESSION) | {OrderStatus.CANCELLED}

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.RETURNED})

# Statuses in which the escrow has been released
_PAID_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.COMPLETED, OrderStatus.RETURNED})


def parse_admin_status(value) -> OrderStatus:
    """Turn an operator-supplied status into an ``OrderStatus``."""
    try:
        status = OrderStatus(str(value).strip().lower())
    except ValueError:
        status = None
    if status not in ADMIN_STATUSES:
        allowed = ", ".join(sorted(s.value for s in ADMIN_STATUSES))
        raise InvalidStatusError(f"Unknown order status {value!r}; expected one of {allowed}")
    return status


def _as_utc(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)  # unit price frozen at checkout
    size = String(max_length=20)
    delivery_date = DateTime(required=True)
    return_expiry_date = DateTime(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    paid = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def paid_only_after_delivery(self):
        released = OrderStatus(self.status) in _PAID_STATUSES
        if bool(self.paid) != released:
            raise ValidationError({"paid": [f"Order in {self.status} state cannot have paid={self.paid}"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        checkout_id,
        product_id,
        shop_id,
        quantity,
        price,
        settings,
        size=None,
        now=None,
    ):
        """Create a pending, unpaid order for one cart line.

        Delivery is committed ``settings.delivery_lead_days`` from ``now`` and
        the return window closes ``settings.return_window_days`` after that.
        """
        now = now or datetime.now(UTC)
        delivery_date = now + timedelta(days=settings.delivery_lead_days)
        return_expiry_date = delivery_date + timedelta(days=settings.return_window_days)

        order = cls(
            user_id=str(user_id),
            checkout_id=str(checkout_id),
            product_id=str(product_id),
            shop_id=str(shop_id),
            quantity=quantity,
            price=money(price) if price is not None else None,
            size=size,
            delivery_date=delivery_date,
            return_expiry_date=return_expiry_date,
            status=OrderStatus.PENDING.value,
            paid=False,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=order.user_id,
                checkout_id=order.checkout_id,
                product_id=order.product_id,
                shop_id=order.shop_id,
                quantity=order.quantity,
                price=order.price,
                delivery_date=delivery_date,
                return_expiry_date=return_expiry_date,
                placed_at=now,
            )
        )
        return order

    @property
    def line_total(self) -> float:
        return money(self.price * self.quantity)

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def belongs_to(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def _set_status(self, target: OrderStatus, now: datetime):
        previous = self.status
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

    def cancel(self) -> float:
        """Cancel a pending order and return the amount owed back to the buyer."""
        if self.current_status != OrderStatus.PENDING:
            raise NotCancellableError(
                f"Only pending orders can be cancelled; order is {self.status}",
                entity_id=self.id,
                status=self.status,
            )

        now = datetime.now(UTC)
        self._set_status(OrderStatus.CANCELLED, now)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                user_id=str(self.user_id),
                refund_amount=self.line_total,
                cancelled_at=now,
            )
        )
        return self.line_total

    def advance_to(self, target: OrderStatus) -> bool:
        """Move the order forward along the fulfilment progression.

        Returns False when the order is already in ``target``. Reaching
        DELIVERED (or skipping past it) releases the escrow exactly once.
        """
        current = self.current_status
        if target == current:
            return False

        if target not in _PROGRESSION or current in TERMINAL_STATUSES or (
            _PROGRESSION.index(target) < _PROGRESSION.index(current)
        ):
            raise IllegalStatusTransitionError(
                f"Cannot move order from {current.value} to {target.value}",
                entity_id=self.id,
                current=current.value,
                target=target.value,
            )

        now = datetime.now(UTC)
        releasing = target in _PAID_STATUSES and not self.paid
        with atomic_change(self):
            self._set_status(target, now)
            if releasing:
                self.paid = True

        if releasing:
            self.raise_(
                EscrowReleased(
                    order_id=str(self.id),
                    user_id=str(self.user_id),
                    shop_id=str(self.shop_id),
                    amount=self.line_total,
                    released_at=now,
                )
            )
        return True

    # -------------------------------------------------------------------
    # Returns
    # -------------------------------------------------------------------
    def assert_returnable(self, now=None):
        if self.current_status != OrderStatus.DELIVERED:
            raise NotEligibleError(
                f"Only delivered orders can be returned; order is {self.status}",
                entity_id=self.id,
                status=self.status,
            )

        now = _as_utc(now or datetime.now(UTC))
        expiry = _as_utc(self.return_expiry_date)
        if now > expiry:
            raise ReturnWindowExpiredError(
                f"Return window closed on {expiry.isoformat()}",
                entity_id=self.id,
                return_expiry_date=expiry.isoformat(),
            )

    def mark_returned(self, return_id):
        if self.current_status != OrderStatus.DELIVERED:
            raise NotEligibleError(
                f"Only delivered orders can be returned; order is {self.status}",
                entity_id=self.id,
                status=self.status,
            )

        now = datetime.now(UTC)
        self._set_status(OrderStatus.RETURNED, now)
        self.raise_(
            OrderReturned(
                order_id=str(self.id),
                user_id=str(self.user_id),
                return_id=str(return_id),
                returned_at=now,
            )
        )


@storefront.repository(part_of=Order)
class OrderRepository:
    def orders_for(self, user_id) -> list[Order]:
        """The user's orders, newest first."""
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda order: order.created_at, reverse=True)


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise OrderNotFoundError(f"Order {order_id} does not exist", entity_id=order_id) from None


def find_order(order_id) -> Order | None:
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        return None
