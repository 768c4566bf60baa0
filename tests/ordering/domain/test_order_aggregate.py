"""Tests for the Order aggregate — placement, cancellation and the escrow state machine."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.config import StorefrontSettings
from storefront.errors import (
    IllegalStatusTransitionError,
    InvalidStatusError,
    NotCancellableError,
    NotEligibleError,
    ReturnWindowExpiredError,
)
from storefront.order.events import EscrowReleased, OrderCancelled, OrderPlaced, OrderReturned, OrderStatusChanged
from storefront.order.order import Order, OrderStatus, parse_admin_status

PLACED_AT = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _make_order(price=20.0, quantity=1, settings=None, **overrides):
    values = {
        "user_id": "u1",
        "checkout_id": "chk-1",
        "product_id": "p1",
        "shop_id": "s1",
        "quantity": quantity,
        "price": price,
        "settings": settings or StorefrontSettings(),
        "now": PLACED_AT,
    }
    values.update(overrides)
    return Order.place(**values)


def _delivered(**kwargs):
    order = _make_order(**kwargs)
    order.advance_to(OrderStatus.DELIVERED)
    order._events.clear()
    return order


class TestPlaceOrder:
    def test_starts_pending_and_unpaid(self):
        order = _make_order()
        assert order.status == OrderStatus.PENDING.value
        assert order.paid is False

    def test_delivery_and_return_dates(self):
        order = _make_order()
        assert order.delivery_date == PLACED_AT + timedelta(days=7)
        assert order.return_expiry_date == PLACED_AT + timedelta(days=37)

    def test_dates_follow_settings(self):
        order = _make_order(settings=StorefrontSettings(delivery_lead_days=2, return_window_days=7))
        assert order.delivery_date == PLACED_AT + timedelta(days=2)
        assert order.return_expiry_date == PLACED_AT + timedelta(days=9)

    def test_price_is_rounded_snapshot(self):
        assert _make_order(price=9.999).price == 10.0

    def test_line_total(self):
        assert _make_order(price=12.5, quantity=3).line_total == 37.5

    def test_raises_placed_event(self):
        event = _make_order()._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.price == 20.0

    @pytest.mark.parametrize("overrides", [{"quantity": 0}, {"price": -1.0}, {"price": None}])
    def test_invalid_data(self, overrides):
        with pytest.raises(ValidationError):
            _make_order(**overrides)


class TestCancel:
    def test_cancel_pending_returns_refund(self):
        order = _make_order(price=20.0, quantity=2)
        order._events.clear()
        assert order.cancel() == 40.0
        assert order.status == OrderStatus.CANCELLED.value
        assert any(isinstance(e, OrderCancelled) and e.refund_amount == 40.0 for e in order._events)

    @pytest.mark.parametrize("status", [OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED])
    def test_only_pending_is_cancellable(self, status):
        order = _make_order()
        order.advance_to(status)
        with pytest.raises(NotCancellableError) as exc_info:
            order.cancel()
        assert exc_info.value.kind == "StateConflict"

    def test_second_cancel_fails(self):
        order = _make_order()
        order.cancel()
        with pytest.raises(NotCancellableError):
            order.cancel()


class TestAdvance:
    def test_forward_progression(self):
        order = _make_order()
        for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.COMPLETED):
            assert order.advance_to(status) is True
            assert order.status == status.value

    def test_status_change_event(self):
        order = _make_order()
        order._events.clear()
        order.advance_to(OrderStatus.SHIPPED)
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert (event.previous_status, event.new_status) == ("pending", "shipped")

    def test_moving_backwards_fails(self):
        order = _make_order()
        order.advance_to(OrderStatus.SHIPPED)
        with pytest.raises(IllegalStatusTransitionError):
            order.advance_to(OrderStatus.PROCESSING)

    def test_terminal_states_do_not_move(self):
        order = _make_order()
        order.cancel()
        with pytest.raises(IllegalStatusTransitionError):
            order.advance_to(OrderStatus.PROCESSING)

    def test_same_status_is_a_no_op(self):
        order = _make_order()
        order.advance_to(OrderStatus.SHIPPED)
        order._events.clear()
        assert order.advance_to(OrderStatus.SHIPPED) is False
        assert order._events == []


class TestEscrowRelease:
    def test_delivery_sets_paid(self):
        order = _make_order()
        order.advance_to(OrderStatus.DELIVERED)
        assert order.paid is True
        released = [e for e in order._events if isinstance(e, EscrowReleased)]
        assert len(released) == 1
        assert released[0].amount == 20.0

    def test_paid_stays_false_before_delivery(self):
        order = _make_order()
        order.advance_to(OrderStatus.SHIPPED)
        assert order.paid is False

    def test_redelivery_is_idempotent(self):
        order = _make_order()
        order.advance_to(OrderStatus.DELIVERED)
        order._events.clear()
        assert order.advance_to(OrderStatus.DELIVERED) is False
        assert order.paid is True
        assert order._events == []

    def test_completion_keeps_paid_without_second_release(self):
        order = _make_order()
        order.advance_to(OrderStatus.DELIVERED)
        order._events.clear()
        order.advance_to(OrderStatus.COMPLETED)
        assert order.paid is True
        assert not any(isinstance(e, EscrowReleased) for e in order._events)

    def test_skipping_straight_to_completed_releases_escrow(self):
        order = _make_order()
        order.advance_to(OrderStatus.COMPLETED)
        assert order.paid is True

    def test_paid_flag_cannot_be_set_early(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.paid = True


class TestReturnWindow:
    def test_just_inside_window(self):
        order = _delivered()
        order.assert_returnable(order.delivery_date + timedelta(days=29, hours=23, minutes=59))

    def test_boundary_is_inclusive(self):
        order = _delivered()
        order.assert_returnable(order.delivery_date + timedelta(days=30))

    def test_one_second_past_window(self):
        order = _delivered()
        with pytest.raises(ReturnWindowExpiredError) as exc_info:
            order.assert_returnable(order.delivery_date + timedelta(days=30, seconds=1))
        assert exc_info.value.entity_id == str(order.id)

    def test_window_follows_settings(self):
        order = _delivered(settings=StorefrontSettings(return_window_days=7))
        with pytest.raises(ReturnWindowExpiredError):
            order.assert_returnable(order.delivery_date + timedelta(days=7, seconds=1))

    def test_naive_now_is_treated_as_utc(self):
        order = _delivered()
        naive = (order.delivery_date + timedelta(days=1)).replace(tzinfo=None)
        order.assert_returnable(naive)

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.SHIPPED, OrderStatus.COMPLETED])
    def test_only_delivered_orders(self, status):
        order = _make_order()
        if status != OrderStatus.PENDING:
            order.advance_to(status)
        with pytest.raises(NotEligibleError):
            order.assert_returnable(PLACED_AT)

    def test_mark_returned(self):
        order = _delivered()
        order.mark_returned("ret-1")
        assert order.status == OrderStatus.RETURNED.value
        assert order.paid is True
        assert isinstance(order._events[-1], OrderReturned)


class TestParseAdminStatus:
    @pytest.mark.parametrize("value", ["pending", "processing", "shipped", "delivered", "completed", "cancelled"])
    def test_accepts_the_six_operator_statuses(self, value):
        assert parse_admin_status(value).value == value

    def test_is_case_insensitive(self):
        assert parse_admin_status(" Shipped ") == OrderStatus.SHIPPED

    @pytest.mark.parametrize("value", ["returned", "lost", "", None])
    def test_rejects_everything_else(self, value):
        with pytest.raises(InvalidStatusError):
            parse_admin_status(value)
