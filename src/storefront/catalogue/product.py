"""Product and Shop aggregates — the catalogue the order engine reads prices from.

The catalogue is a thin collaborator: carts look products up by id and read
the live price, orders copy that price once at checkout.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.events import ProductAdded, ProductPriceChanged, ShopRegistered
from storefront.domain import storefront
from storefront.errors import ProductNotFoundError, ShopNotFoundError
from storefront.utils.money import money


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    description = Text()
    brand = String(max_length=100)
    category = String(max_length=100)
    price = Float(required=True, min_value=0.0)
    regular_price = Float(min_value=0.0)
    stock = Integer(default=0, min_value=0)
    created_at = DateTime()

    @classmethod
    def add(cls, name, price, description=None, brand=None, category=None, regular_price=None, stock=0):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=money(price),
            description=description,
            brand=brand,
            category=category,
            regular_price=money(regular_price) if regular_price is not None else None,
            stock=stock,
            created_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=product.name,
                price=product.price,
                added_at=now,
            )
        )
        return product

    def change_price(self, new_price):
        previous_price = self.price
        self.price = money(new_price)
        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                previous_price=previous_price,
                new_price=self.price,
                changed_at=datetime.now(UTC),
            )
        )


@storefront.aggregate
class Shop:
    name = String(required=True, max_length=255)
    location = String(max_length=255)
    description = Text()
    created_at = DateTime()

    @classmethod
    def register(cls, name, location=None, description=None):
        now = datetime.now(UTC)
        shop = cls(name=name, location=location, description=description, created_at=now)
        shop.raise_(ShopRegistered(shop_id=str(shop.id), name=shop.name, registered_at=now))
        return shop


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------
def get_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        raise ProductNotFoundError(f"Product {product_id} does not exist", entity_id=product_id) from None


def get_shop(shop_id) -> Shop:
    try:
        return current_domain.repository_for(Shop).get(str(shop_id))
    except ObjectNotFoundError:
        raise ShopNotFoundError(f"Shop {shop_id} does not exist", entity_id=shop_id) from None


def find_product(product_id) -> Product | None:
    """Like ``get_product`` but returns None for products that have left the catalogue."""
    try:
        return current_domain.repository_for(Product).get(str(product_id))
    except ObjectNotFoundError:
        return None


def find_shop(shop_id) -> Shop | None:
    try:
        return current_domain.repository_for(Shop).get(str(shop_id))
    except ObjectNotFoundError:
        return None
