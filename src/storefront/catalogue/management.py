"""Catalogue management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product, Shop, get_product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    description = Text()
    brand = String(max_length=100)
    category = String(max_length=100)
    regular_price = Float(min_value=0.0)
    stock = Integer(default=0, min_value=0)


@storefront.command(part_of="Product")
class ChangeProductPrice:
    product_id = Identifier(required=True)
    new_price = Float(required=True, min_value=0.0)


@storefront.command(part_of="Shop")
class RegisterShop:
    name = String(required=True, max_length=255)
    location = String(max_length=255)
    description = Text()


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            price=command.price,
            description=command.description,
            brand=command.brand,
            category=command.category,
            regular_price=command.regular_price,
            stock=command.stock or 0,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ChangeProductPrice)
    def change_product_price(self, command):
        product = get_product(command.product_id)
        product.change_price(command.new_price)
        current_domain.repository_for(Product).add(product)


@storefront.command_handler(part_of=Shop)
class ManageShopsHandler:
    @handle(RegisterShop)
    def register_shop(self, command):
        shop = Shop.register(
            name=command.name,
            location=command.location,
            description=command.description,
        )
        current_domain.repository_for(Shop).add(shop)
        return str(shop.id)
