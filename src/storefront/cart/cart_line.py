"""CartLine aggregate — one pending purchase intent of a user.

A cart is simply the set of lines owned by a user. Lines carry no price:
totals are always derived at read time from the live catalogue price.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String

from storefront.cart.events import CartLineAdded, CartLineUpdated
from storefront.domain import storefront


@storefront.aggregate
class CartLine:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=20)
    delivery_date = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def add(cls, user_id, product_id, shop_id, quantity=1, size=None, delivery_date=None):
        now = datetime.now(UTC)
        line = cls(
            user_id=str(user_id),
            product_id=str(product_id),
            shop_id=str(shop_id),
            quantity=quantity,
            size=size,
            delivery_date=delivery_date,
            created_at=now,
            updated_at=now,
        )
        line.raise_(
            CartLineAdded(
                line_id=str(line.id),
                user_id=line.user_id,
                product_id=line.product_id,
                shop_id=line.shop_id,
                quantity=line.quantity,
                size=line.size,
                added_at=now,
            )
        )
        return line

    def belongs_to(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def update(self, quantity=None, size=None, delivery_date=None):
        """Change any subset of quantity, size and delivery date."""
        if quantity is not None:
            self.quantity = quantity
        if size is not None:
            self.size = size
        if delivery_date is not None:
            self.delivery_date = delivery_date
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartLineUpdated(
                line_id=str(self.id),
                user_id=str(self.user_id),
                quantity=self.quantity,
                size=self.size,
                delivery_date=self.delivery_date,
                updated_at=self.updated_at,
            )
        )


@storefront.repository(part_of=CartLine)
class CartLineRepository:
    def lines_for(self, user_id) -> list[CartLine]:
        """The user's cart, oldest line first."""
        lines = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(lines, key=lambda line: line.created_at)
