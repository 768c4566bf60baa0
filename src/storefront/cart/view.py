"""Cart read model, composed at read time.

Line totals use the product's current catalogue price, so the cart total can
differ from what checkout later charges if a price changes in between.
"""

from dataclasses import dataclass, field
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.cart.cart_line import CartLine
from storefront.catalogue.product import Product, Shop, find_product, find_shop
from storefront.utils.money import money, money_sum


@dataclass
class CartLineView:
    id: str
    product_id: str
    shop_id: str
    quantity: int
    size: str | None
    delivery_date: datetime | None
    created_at: datetime | None
    product: Product | None
    shop: Shop | None
    unit_price: float
    line_total: float


@dataclass
class CartView:
    user_id: str
    lines: list[CartLineView] = field(default_factory=list)
    total: float = 0.0


def _line_view(line: CartLine) -> CartLineView:
    product = find_product(line.product_id)
    unit_price = money(product.price) if product else 0.0
    return CartLineView(
        id=str(line.id),
        product_id=str(line.product_id),
        shop_id=str(line.shop_id),
        quantity=line.quantity,
        size=line.size,
        delivery_date=line.delivery_date,
        created_at=line.created_at,
        product=product,
        shop=find_shop(line.shop_id),
        unit_price=unit_price,
        line_total=money(unit_price * line.quantity),
    )


def cart_view(user_id) -> CartView:
    lines = [_line_view(line) for line in current_domain.repository_for(CartLine).lines_for(user_id)]
    return CartView(
        user_id=str(user_id),
        lines=lines,
        total=money_sum(line.line_total for line in lines),
    )
