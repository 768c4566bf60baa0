"""Tests for the CartLine aggregate."""

from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart_line import CartLine
from storefront.cart.events import CartLineAdded, CartLineUpdated


def _make_line(**overrides):
    values = {"user_id": "u1", "product_id": "p1", "shop_id": "s1", "quantity": 2, "size": "M"}
    values.update(overrides)
    return CartLine.add(**values)


class TestAddLine:
    def test_add_raises_event(self):
        line = _make_line()
        assert isinstance(line._events[0], CartLineAdded)
        assert line._events[0].quantity == 2

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError) as exc_info:
            _make_line(quantity=0)
        assert "quantity" in exc_info.value.messages

    def test_size_is_limited(self):
        with pytest.raises(ValidationError):
            _make_line(size="x" * 21)

    def test_delivery_date_is_optional(self):
        assert _make_line().delivery_date is None


class TestUpdateLine:
    def test_partial_update_keeps_other_fields(self):
        line = _make_line()
        line.update(quantity=5)
        assert line.quantity == 5
        assert line.size == "M"

    def test_update_delivery_date(self):
        line = _make_line()
        when = datetime(2030, 1, 15, tzinfo=UTC)
        line.update(delivery_date=when)
        assert line.delivery_date == when

    def test_update_raises_event(self):
        line = _make_line()
        line._events.clear()
        line.update(size="L")
        assert isinstance(line._events[0], CartLineUpdated)
        assert line._events[0].size == "L"

    def test_update_rejects_zero_quantity(self):
        line = _make_line()
        with pytest.raises(ValidationError):
            line.update(quantity=0)

    def test_ownership(self):
        line = _make_line()
        assert line.belongs_to("u1")
        assert not line.belongs_to("u2")
