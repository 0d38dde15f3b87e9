"""Order queries and shipping updates with ownership and window checks."""

import pytest

from storefront.data.models import OrderModel
from storefront.domain.errors import (
    ConflictError,
    ExpiredError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from storefront.domain.schemas import CheckoutIn, Identity, ShippingIn
from storefront.services.order_service import OrderService
from tests.conftest import make_product, make_user, put_in_cart

NEW_ADDRESS = ShippingIn(
    recipient_name="Andi", phone="0811111111", address="Jl. Sudirman 9", postal_code="40111"
)


@pytest.fixture
def order(db, clock):
    make_user(db, "u1")
    product = make_product(db, stock=10)
    put_in_cart(db, "u1", product, 1)
    return OrderService(db, clock=clock).checkout("u1", CheckoutIn())


class TestShippingUpdate:
    def test_updates_all_fields(self, db, clock, order):
        clock.advance(minutes=5)
        updated = OrderService(db, clock=clock).update_shipping(order.id, "u1", NEW_ADDRESS)
        assert updated.recipient_name == "Andi"
        assert updated.postal_code == "40111"

    def test_all_fields_required(self, db, clock, order):
        with pytest.raises(ValidationError, match="postal_code"):
            OrderService(db, clock=clock).update_shipping(
                order.id, "u1", ShippingIn(recipient_name="A", phone="1", address="x", postal_code="  ")
            )

    def test_unknown_order(self, db, clock, order):
        with pytest.raises(NotFoundError):
            OrderService(db, clock=clock).update_shipping(9999, "u1", NEW_ADDRESS)

    def test_other_user_is_forbidden(self, db, clock, order):
        with pytest.raises(ForbiddenError):
            OrderService(db, clock=clock).update_shipping(order.id, "intruder", NEW_ADDRESS)

    def test_processed_order_is_a_conflict(self, db, clock, order):
        order.status = "paid"
        db.commit()
        with pytest.raises(ConflictError) as exc:
            OrderService(db, clock=clock).update_shipping(order.id, "u1", NEW_ADDRESS)
        assert exc.value.current_status == "paid"

    def test_allowed_one_second_before_window_closes(self, db, clock, order):
        clock.advance(minutes=14, seconds=59)
        updated = OrderService(db, clock=clock).update_shipping(order.id, "u1", NEW_ADDRESS)
        assert updated.status == "pending"

    def test_expires_order_when_window_elapsed(self, db, clock, order):
        clock.advance(minutes=15)
        with pytest.raises(ExpiredError):
            OrderService(db, clock=clock).update_shipping(order.id, "u1", NEW_ADDRESS)

        db.expire_all()
        stored = db.get(OrderModel, order.id)
        assert stored.status == "expired"
        assert stored.recipient_name == "Budi"


class TestQueries:
    def test_owner_can_read(self, db, clock, order):
        found = OrderService(db, clock=clock).get_order(order.id, Identity(id="u1"))
        assert found.id == order.id

    def test_admin_can_read_any(self, db, clock, order):
        found = OrderService(db, clock=clock).get_order(order.id, Identity(id="boss", role="admin"))
        assert found.id == order.id

    def test_stranger_cannot_read(self, db, clock, order):
        with pytest.raises(ForbiddenError):
            OrderService(db, clock=clock).get_order(order.id, Identity(id="u2"))

    def test_missing_order(self, db, clock):
        with pytest.raises(NotFoundError):
            OrderService(db, clock=clock).get_order(1, Identity(id="u1"))

    def test_list_orders_newest_first(self, db, clock, order):
        product = make_product(db, name="B", stock=3)
        put_in_cart(db, "u1", product, 1)
        clock.advance(minutes=1)
        second = OrderService(db, clock=clock).checkout("u1", CheckoutIn())

        orders = OrderService(db, clock=clock).list_orders("u1")
        assert [o.id for o in orders] == [second.id, order.id]
        assert OrderService(db, clock=clock).list_orders("u2") == []

    def test_all_orders_requires_admin(self, db, clock, order):
        svc = OrderService(db, clock=clock)
        with pytest.raises(ForbiddenError):
            svc.list_all_orders(Identity(id="u1"))
        assert len(svc.list_all_orders(Identity(id="boss", role="admin"))) == 1
