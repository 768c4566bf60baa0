"""Operator status updates — command and handler.

Orders only move forward. Requesting ``cancelled`` follows the customer
cancellation path, refund included, so the wallet always reconciles.
Completing a delivered order closes its return window, so a return still
awaiting a decision is rejected in the same unit of work.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.cancellation import cancel_and_refund
from storefront.order.order import Order, OrderStatus, load_order, parse_admin_status
from storefront.returns.return_request import Return, ReturnStatus
from storefront.utils.logging import get_logger
from storefront.wallet.locks import process_serialized

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class SetOrderStatus:
    """Move an order to one of the six operator statuses.

    Unknown values and ``returned`` fail with ``InvalidStatusError`` (400).
    Moving backwards or out of ``completed`` or ``cancelled`` fails with
    ``IllegalStatusTransitionError`` (409); a released escrow is never
    cleared. Re-applying the current status is a no-op.
    """

    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)


@storefront.command_handler(part_of=Order)
class SetOrderStatusHandler:
    @handle(SetOrderStatus)
    def set_order_status(self, command):
        order = load_order(command.order_id)
        target = parse_admin_status(command.status)
        previous = order.status

        if target == OrderStatus.CANCELLED:
            if order.current_status == OrderStatus.CANCELLED:
                return str(order.id)
            cancel_and_refund(order)
        elif order.advance_to(target):
            current_domain.repository_for(Order).add(order)
            if target == OrderStatus.COMPLETED:
                _reject_open_returns(order)
        else:
            return str(order.id)

        logger.info("order_status_changed", order_id=str(order.id), previous=previous, status=order.status)
        return str(order.id)


def _reject_open_returns(order):
    repo = current_domain.repository_for(Return)
    for return_request in repo.for_order(order.id):
        if ReturnStatus(return_request.status) == ReturnStatus.REQUESTED:
            return_request.reject()
            repo.add(return_request)
            logger.info("return_rejected_on_completion", return_id=str(return_request.id), order_id=str(order.id))


def set_order_status(order_id, status) -> Order:
    # The owner's lock serialises the escrow release and refunds with their other operations
    owner_id = load_order(order_id).user_id
    process_serialized(owner_id, SetOrderStatus(order_id=str(order_id), status=str(status)))
    return load_order(order_id)
