"""Order cancellation — command and handler.

Only pending orders can be cancelled. The buyer gets ``price × quantity``
back in the same unit of work that cancels the order.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import NotOwnerError
from storefront.order.order import Order, load_order
from storefront.wallet.entry import TransactionType
from storefront.wallet.ledger import ledger
from storefront.wallet.locks import process_serialized


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


def cancel_and_refund(order: Order) -> float:
    """Cancel ``order``, persist it and credit the refund. Returns the new balance."""
    refund = order.cancel()
    current_domain.repository_for(Order).add(order)
    if refund <= 0:
        return ledger.balance_of(order.user_id)
    return ledger.credit(
        order.user_id,
        refund,
        transaction_type=TransactionType.CANCELLATION_REFUND,
        reference_id=order.id,
    )


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_order(command.order_id)
        if not order.belongs_to(command.user_id):
            raise NotOwnerError(f"Order {order.id} belongs to another user", entity_id=order.id)

        cancel_and_refund(order)
        return str(order.id)


def cancel_order(order_id, user_id) -> Order:
    process_serialized(user_id, CancelOrder(order_id=str(order_id), user_id=str(user_id)))
    return load_order(order_id)
