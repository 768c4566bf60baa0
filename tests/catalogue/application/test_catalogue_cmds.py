"""Application tests for catalogue commands and lookups."""

import pytest
from protean import current_domain
from storefront.catalogue.events import ProductPriceChanged
from storefront.catalogue.management import ChangeProductPrice
from storefront.catalogue.product import Product, get_product, get_shop
from storefront.errors import ProductNotFoundError, ShopNotFoundError


class TestProducts:
    def test_add_product(self, make_product):
        product = get_product(make_product(12.345, name="Mug"))
        assert product.name == "Mug"
        assert product.price == 12.35

    def test_change_price(self, make_product):
        product_id = make_product(10.0)
        current_domain.process(ChangeProductPrice(product_id=product_id, new_price=14.0), asynchronous=False)
        assert get_product(product_id).price == 14.0

    def test_change_price_raises_event(self):
        product = Product.add(name="Mug", price=10.0)
        product._events.clear()
        product.change_price(8.0)
        event = product._events[0]
        assert isinstance(event, ProductPriceChanged)
        assert (event.previous_price, event.new_price) == (10.0, 8.0)

    def test_unknown_product(self):
        with pytest.raises(ProductNotFoundError) as exc_info:
            get_product("missing")
        assert exc_info.value.kind == "NotFound"
        assert exc_info.value.entity_id == "missing"


class TestShops:
    def test_register_shop(self, shop_id):
        assert get_shop(shop_id).name == "Corner Shop"

    def test_unknown_shop(self):
        with pytest.raises(ShopNotFoundError):
            get_shop("missing")
