"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order was created at checkout with its price frozen."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    checkout_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    quantity = Integer(required=True)
    price = Float(required=True)
    delivery_date = DateTime(required=True)
    return_expiry_date = DateTime(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    refund_amount = Float(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class EscrowReleased:
    """Payment held since checkout is now recognised as the shop's revenue."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    amount = Float(required=True)
    released_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderReturned:
    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    return_id = Identifier(required=True)
    returned_at = DateTime(required=True)
