"""Order state machine: transitions from pending and sticky terminal states."""

import pytest

from storefront.domain.lifecycle import OrderEvent, OrderStatus, apply_event


class TestFromPending:
    @pytest.mark.parametrize(
        "event, target",
        [
            (OrderEvent.SETTLED, OrderStatus.PAID),
            (OrderEvent.GATEWAY_EXPIRED, OrderStatus.EXPIRED),
            (OrderEvent.WINDOW_ELAPSED, OrderStatus.EXPIRED),
            (OrderEvent.GATEWAY_CANCELLED, OrderStatus.CANCELLED),
        ],
    )
    def test_transition_targets(self, event, target):
        transition = apply_event(OrderStatus.PENDING, event)
        assert transition.target is target
        assert transition.changed

    def test_settlement_carries_stock_and_timestamp_effects(self):
        transition = apply_event(OrderStatus.PENDING, OrderEvent.SETTLED)
        assert transition.decrement_stock
        assert transition.stamp_paid_at

    @pytest.mark.parametrize(
        "event",
        [OrderEvent.GATEWAY_EXPIRED, OrderEvent.WINDOW_ELAPSED, OrderEvent.GATEWAY_CANCELLED],
    )
    def test_non_paid_transitions_have_no_side_effects(self, event):
        transition = apply_event(OrderStatus.PENDING, event)
        assert not transition.decrement_stock
        assert not transition.stamp_paid_at

    def test_gateway_pending_is_a_no_op(self):
        transition = apply_event(OrderStatus.PENDING, OrderEvent.GATEWAY_PENDING)
        assert transition.target is OrderStatus.PENDING
        assert not transition.changed

    def test_accepts_raw_status_string(self):
        assert apply_event("pending", OrderEvent.SETTLED).target is OrderStatus.PAID


class TestTerminalStates:
    @pytest.mark.parametrize(
        "status", [OrderStatus.PAID, OrderStatus.EXPIRED, OrderStatus.CANCELLED]
    )
    @pytest.mark.parametrize("event", list(OrderEvent))
    def test_terminal_states_are_sticky(self, status, event):
        transition = apply_event(status, event)
        assert transition.target is status
        assert not transition.changed
        assert not transition.decrement_stock
        assert not transition.stamp_paid_at

    def test_is_terminal(self):
        assert not OrderStatus.PENDING.is_terminal
        assert OrderStatus.PAID.is_terminal
        assert OrderStatus.EXPIRED.is_terminal
        assert OrderStatus.CANCELLED.is_terminal
