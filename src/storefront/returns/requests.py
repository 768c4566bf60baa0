"""Return requests and their resolution — commands and handler."""

from datetime import UTC, datetime

from protean import handle
from protean.fields import Boolean, Identifier, Text
from protean.utils.globals import current_domain

from storefront.config import get_settings
from storefront.domain import storefront
from storefront.errors import NotEligibleError, NotOwnerError
from storefront.order.order import Order, load_order
from storefront.returns.return_request import Return, load_return
from storefront.utils.logging import get_logger
from storefront.wallet.entry import TransactionType
from storefront.wallet.ledger import ledger
from storefront.wallet.locks import process_serialized

logger = get_logger(__name__)


@storefront.command(part_of="Return")
class RequestReturn:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = Text()


@storefront.command(part_of="Return")
class ResolveReturn:
    return_id = Identifier(required=True)
    approve = Boolean(required=True)


@storefront.command_handler(part_of=Return)
class ReturnRequestsHandler:
    @handle(RequestReturn)
    def request_return(self, command):
        order = load_order(command.order_id)
        if not order.belongs_to(command.user_id):
            raise NotOwnerError(f"Order {order.id} belongs to another user", entity_id=order.id)

        order.assert_returnable(datetime.now(UTC))

        repo = current_domain.repository_for(Return)
        active = repo.active_for_order(order.id)
        if active is not None:
            raise NotEligibleError(
                f"Order {order.id} already has a {active.status} return",
                entity_id=order.id,
                return_id=str(active.id),
            )

        return_request = Return.request(order, command.reason, get_settings().refund_basis)
        repo.add(return_request)
        return str(return_request.id)

    @handle(ResolveReturn)
    def resolve_return(self, command):
        return_request = load_return(command.return_id)

        if not command.approve:
            return_request.reject()
            current_domain.repository_for(Return).add(return_request)
            logger.info("return_rejected", return_id=str(return_request.id))
            return str(return_request.id)

        return_request.approve()
        order = load_order(return_request.order_id)
        order.mark_returned(return_request.id)

        current_domain.repository_for(Order).add(order)
        current_domain.repository_for(Return).add(return_request)
        if return_request.refund_amount > 0:
            ledger.credit(
                order.user_id,
                return_request.refund_amount,
                transaction_type=TransactionType.RETURN_REFUND,
                reference_id=return_request.id,
            )

        logger.info(
            "return_approved",
            return_id=str(return_request.id),
            order_id=str(order.id),
            refund_amount=return_request.refund_amount,
        )
        return str(return_request.id)


def request_return(order_id, user_id, reason=None) -> Return:
    return_id = process_serialized(
        user_id,
        RequestReturn(order_id=str(order_id), user_id=str(user_id), reason=reason),
    )
    return load_return(return_id)


def resolve_return(return_id, approve: bool) -> Return:
    owner_id = load_order(load_return(return_id).order_id).user_id
    process_serialized(owner_id, ResolveReturn(return_id=str(return_id), approve=approve))
    return load_return(return_id)
