"""Return read model — each return shown with its order resolved on read."""

from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.order.order import Order, find_order
from storefront.order.view import OrderView, order_view
from storefront.returns.return_request import Return


@dataclass(frozen=True)
class ReturnView:
    id: str
    order_id: str
    reason: str | None
    status: str
    refund_amount: float
    created_at: datetime | None
    resolved_at: datetime | None
    order: OrderView | None


def return_view(return_request: Return, order: Order | None = None) -> ReturnView:
    if order is None:
        order = find_order(return_request.order_id)
    return ReturnView(
        id=str(return_request.id),
        order_id=str(return_request.order_id),
        reason=return_request.reason,
        status=return_request.status,
        refund_amount=return_request.refund_amount,
        created_at=return_request.created_at,
        resolved_at=return_request.resolved_at,
        order=order_view(order) if order else None,
    )


def list_returns(user_id) -> list[ReturnView]:
    """Returns raised against the user's orders, newest first."""
    repo = current_domain.repository_for(Return)
    views = [
        return_view(return_request, order)
        for order in current_domain.repository_for(Order).orders_for(user_id)
        for return_request in repo.for_order(order.id)
    ]
    return sorted(views, key=lambda view: view.created_at, reverse=True)


def list_all_returns() -> list[ReturnView]:
    return [return_view(return_request) for return_request in current_domain.repository_for(Return).everything()]
