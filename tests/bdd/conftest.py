"""Shared BDD fixtures and step definitions for the escrow lifecycle."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from storefront.cart.cart_line import CartLine
from storefront.order.order import Order, OrderStatus, load_order
from storefront.wallet.ledger import ledger
from storefront.wallet.operations import withdraw


@pytest.fixture
def world():
    """Mutable scenario state shared between steps."""
    return {"products": {}, "orders": {}, "error": None}


def order_for_price(world, price):
    return load_order(world["orders"][float(price)])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a shopper with {amount:f} in their wallet"))
def _(world, make_user, amount):
    world["user_id"] = make_user(balance=amount)


@given(parsers.cfparse("a cart holding {quantity:d} of a product priced {price:f}"))
def _(world, make_product, fill_cart, quantity, price):
    product_id = make_product(price, name=f"Product at {price:.2f}")
    world["products"][product_id] = price
    fill_cart(world["user_id"], (product_id, quantity))


@given(parsers.cfparse("the shopper withdraws {amount:f}"))
def _(world, amount):
    withdraw(world["user_id"], amount)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the wallet balance is {amount:f}"))
def _(world, amount):
    assert ledger.balance_of(world["user_id"]) == pytest.approx(amount)


@then(parsers.cfparse("{count:d} orders are pending and unpaid"))
def _(world, count):
    orders = current_domain.repository_for(Order).orders_for(world["user_id"])
    assert len(orders) == count
    assert all(o.status == OrderStatus.PENDING.value and not o.paid for o in orders)


@then("the cart is empty")
def _(world):
    assert current_domain.repository_for(CartLine).lines_for(world["user_id"]) == []


@then(parsers.cfparse("the cart still holds {count:d} lines"))
def _(world, count):
    assert len(current_domain.repository_for(CartLine).lines_for(world["user_id"])) == count


@then(parsers.cfparse('the checkout fails with "{code}"'))
def _(world, code):
    assert world["error"] is not None
    assert world["error"].code == code


@then("that order is paid")
def _(world):
    assert load_order(world["current_order"]).paid is True


@then(parsers.cfparse('that order is "{status}"'))
def _(world, status):
    assert load_order(world["current_order"]).status == status
