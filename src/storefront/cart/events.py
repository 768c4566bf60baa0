"""Domain events for cart lines."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="CartLine")
class CartLineAdded:
    __version__ = 1

    line_id = Identifier(required=True)
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    quantity = Integer(required=True)
    size = String(max_length=20)
    added_at = DateTime(required=True)


@storefront.event(part_of="CartLine")
class CartLineUpdated:
    __version__ = 1

    line_id = Identifier(required=True)
    user_id = Identifier(required=True)
    quantity = Integer(required=True)
    size = String(max_length=20)
    delivery_date = DateTime()
    updated_at = DateTime(required=True)
