"""Cart item management — commands and handler.

A caller can only see and touch their own lines: a line id that belongs to
somebody else is reported as not found.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart_line import CartLine
from storefront.catalogue.product import get_product, get_shop
from storefront.domain import storefront
from storefront.errors import CartLineNotFoundError


@storefront.command(part_of="CartLine")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)
    size = String(max_length=20)
    delivery_date = DateTime()


@storefront.command(part_of="CartLine")
class UpdateCartLine:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(min_value=1)
    size = String(max_length=20)
    delivery_date = DateTime()


@storefront.command(part_of="CartLine")
class RemoveCartLine:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)


@storefront.command(part_of="CartLine")
class ClearCart:
    user_id = Identifier(required=True)


def _owned_line(repo, line_id, user_id) -> CartLine:
    try:
        line = repo.get(str(line_id))
    except ObjectNotFoundError:
        line = None
    if line is None or not line.belongs_to(user_id):
        raise CartLineNotFoundError(f"Cart line {line_id} not found", entity_id=line_id)
    return line


def clear_lines(user_id) -> int:
    """Delete every cart line of ``user_id`` and return how many were removed."""
    repo = current_domain.repository_for(CartLine)
    lines = repo.lines_for(user_id)
    for line in lines:
        repo._dao.delete(line)
    return len(lines)


@storefront.command_handler(part_of=CartLine)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = get_product(command.product_id)
        shop = get_shop(command.shop_id)

        line = CartLine.add(
            user_id=command.user_id,
            product_id=product.id,
            shop_id=shop.id,
            quantity=command.quantity or 1,
            size=command.size,
            delivery_date=command.delivery_date,
        )
        current_domain.repository_for(CartLine).add(line)
        return str(line.id)

    @handle(UpdateCartLine)
    def update_cart_line(self, command):
        repo = current_domain.repository_for(CartLine)
        line = _owned_line(repo, command.line_id, command.user_id)
        line.update(
            quantity=command.quantity,
            size=command.size,
            delivery_date=command.delivery_date,
        )
        repo.add(line)
        return str(line.id)

    @handle(RemoveCartLine)
    def remove_cart_line(self, command):
        repo = current_domain.repository_for(CartLine)
        line = _owned_line(repo, command.line_id, command.user_id)
        repo._dao.delete(line)

    @handle(ClearCart)
    def clear_cart(self, command):
        return clear_lines(command.user_id)
