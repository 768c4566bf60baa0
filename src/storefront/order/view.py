"""Order read model — orders joined with their product and shop on every read."""

from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product, Shop, find_product, find_shop
from storefront.errors import NotOwnerError
from storefront.order.order import Order, load_order


@dataclass(frozen=True)
class OrderView:
    id: str
    user_id: str
    checkout_id: str
    product_id: str
    shop_id: str
    quantity: int
    price: float
    line_total: float
    size: str | None
    status: str
    paid: bool
    delivery_date: datetime
    return_expiry_date: datetime
    created_at: datetime | None
    updated_at: datetime | None
    product: Product | None
    shop: Shop | None


def order_view(order: Order) -> OrderView:
    return OrderView(
        id=str(order.id),
        user_id=str(order.user_id),
        checkout_id=str(order.checkout_id),
        product_id=str(order.product_id),
        shop_id=str(order.shop_id),
        quantity=order.quantity,
        price=order.price,
        line_total=order.line_total,
        size=order.size,
        status=order.status,
        paid=bool(order.paid),
        delivery_date=order.delivery_date,
        return_expiry_date=order.return_expiry_date,
        created_at=order.created_at,
        updated_at=order.updated_at,
        product=find_product(order.product_id),
        shop=find_shop(order.shop_id),
    )


def list_orders(user_id) -> list[OrderView]:
    """The user's orders, newest first."""
    return [order_view(order) for order in current_domain.repository_for(Order).orders_for(user_id)]


def get_order(order_id, user_id) -> OrderView:
    order = load_order(order_id)
    if not order.belongs_to(user_id):
        raise NotOwnerError(f"Order {order_id} belongs to another user", entity_id=order_id)
    return order_view(order)
