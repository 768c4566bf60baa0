"""Checkout — turns a user's cart into orders paid from the wallet.

The whole cart is charged with a single debit. Orders are then built from
the prices read for that debit, one per cart line. If any order cannot be
built the debit is credited back before the failure is reported, and the
cart is left as it was. The cart is cleared only once every order exists.
"""

from uuid import uuid4

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.cart.cart_line import CartLine
from storefront.cart.items import clear_lines
from storefront.catalogue.product import get_product
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.errors import EmptyCartError, InsufficientBalanceError, InvalidOrderDataError
from storefront.order.order import Order, load_order
from storefront.utils.logging import get_logger
from storefront.utils.money import money, money_sum
from storefront.wallet.entry import TransactionType
from storefront.wallet.ledger import ledger
from storefront.wallet.locks import process_serialized

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class Checkout:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        user_id = str(command.user_id)
        lines = current_domain.repository_for(CartLine).lines_for(user_id)
        if not lines:
            raise EmptyCartError("Cart is empty", entity_id=user_id)

        priced = [(line, money(get_product(line.product_id).price)) for line in lines]
        total = money_sum(price * line.quantity for line, price in priced)

        balance = ledger.balance_of(user_id)
        if total > balance:
            logger.warning("checkout_rejected", user_id=user_id, total=total, balance=balance)
            raise InsufficientBalanceError(
                f"Cart total {total:.2f} exceeds wallet balance {balance:.2f}",
                entity_id=user_id,
                total=total,
                balance=balance,
            )

        checkout_id = str(uuid4())
        if total > 0:
            ledger.debit(user_id, total, transaction_type=TransactionType.ORDER_PLACEMENT, reference_id=checkout_id)

        settings = get_settings()
        try:
            orders = [
                Order.place(
                    user_id=user_id,
                    checkout_id=checkout_id,
                    product_id=line.product_id,
                    shop_id=line.shop_id,
                    quantity=line.quantity,
                    price=price,
                    size=line.size,
                    settings=settings,
                )
                for line, price in priced
            ]
        except ValidationError as exc:
            if total > 0:
                ledger.credit(
                    user_id,
                    total,
                    transaction_type=TransactionType.CHECKOUT_ROLLBACK,
                    reference_id=checkout_id,
                )
            logger.error("checkout_rolled_back", user_id=user_id, checkout_id=checkout_id, errors=exc.messages)
            raise InvalidOrderDataError(
                "Order data failed validation; the charge was refunded",
                entity_id=checkout_id,
                errors=exc.messages,
            ) from exc

        repo = current_domain.repository_for(Order)
        for order in orders:
            repo.add(order)
        clear_lines(user_id)

        logger.info("checkout_completed", user_id=user_id, checkout_id=checkout_id, orders=len(orders), total=total)
        return [str(order.id) for order in orders]


def checkout(user_id) -> list[Order]:
    """Place every line of the user's cart and return the new orders."""
    order_ids = process_serialized(user_id, Checkout(user_id=str(user_id)))
    return [load_order(order_id) for order_id in order_ids]
