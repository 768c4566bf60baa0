"""Domain events for catalogue aggregates."""

from protean.fields import DateTime, Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A product was listed in the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    added_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """A product's selling price changed. Placed orders keep their snapshot."""

    __version__ = 1

    product_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Shop")
class ShopRegistered:
    """A shop that fulfils orders was registered."""

    __version__ = 1

    shop_id = Identifier(required=True)
    name = String(required=True)
    registered_at = DateTime(required=True)
