"""Checkout: cart to order with frozen prices, in a single transaction."""

from decimal import Decimal

import pytest

from storefront.data.models import CartItemModel, OrderItemModel, OrderModel
from storefront.domain.errors import ValidationError
from storefront.domain.schemas import CheckoutIn
from storefront.repos.cart_repo import CartRepo
from storefront.services.order_service import OrderService
from tests.conftest import make_product, make_user, put_in_cart


def test_checkout_freezes_discounted_price_and_clears_cart(db, clock):
    make_user(db, "u1")
    product = make_product(db, price="100", discount_percent=10, stock=5)
    put_in_cart(db, "u1", product, 2)

    order = OrderService(db, clock=clock).checkout("u1", CheckoutIn())

    assert order.status == "pending"
    assert order.total == Decimal("180")
    assert len(order.items) == 1
    assert order.items[0].price == Decimal("90")
    assert order.items[0].quantity == 2
    assert order.paid_at is None
    assert db.query(CartItemModel).filter_by(user_id="u1").count() == 0


def test_frozen_price_survives_later_product_changes(db, clock):
    make_user(db, "u1")
    product = make_product(db, price="100", discount_percent=10, stock=5)
    put_in_cart(db, "u1", product, 1)
    order = OrderService(db, clock=clock).checkout("u1", CheckoutIn())

    product.price = Decimal("500")
    product.discount_percent = 0
    db.commit()

    item = db.query(OrderItemModel).filter_by(order_id=order.id).one()
    assert item.price == Decimal("90")


def test_shipping_falls_back_to_profile_defaults(db, clock):
    make_user(db, "u1")
    product = make_product(db)
    put_in_cart(db, "u1", product, 1)

    order = OrderService(db, clock=clock).checkout(
        "u1", CheckoutIn(recipient_name="  Siti  ", phone="   ")
    )

    assert order.recipient_name == "Siti"
    assert order.phone == "08123456789"
    assert order.address == "Jl. Merdeka 1"
    assert order.postal_code == "10110"


def test_blank_shipping_without_profile_is_stored_as_null(db, clock):
    product = make_product(db)
    put_in_cart(db, "ghost", product, 1)

    order = OrderService(db, clock=clock).checkout("ghost", CheckoutIn())

    assert order.recipient_name is None
    assert order.postal_code is None


def test_empty_cart_is_rejected(db, clock):
    make_user(db, "u1")
    with pytest.raises(ValidationError, match="Cart is empty"):
        OrderService(db, clock=clock).checkout("u1", CheckoutIn())


def test_quantity_above_stock_is_rejected(db, clock):
    make_user(db, "u1")
    product = make_product(db, stock=2)
    put_in_cart(db, "u1", product, 3)

    with pytest.raises(ValidationError, match="exceeds stock"):
        OrderService(db, clock=clock).checkout("u1", CheckoutIn())
    assert db.query(OrderModel).count() == 0


def test_out_of_stock_product_is_rejected(db, clock):
    make_user(db, "u1")
    product = make_product(db, stock=0)
    put_in_cart(db, "u1", product, 1)

    with pytest.raises(ValidationError, match="out of stock"):
        OrderService(db, clock=clock).checkout("u1", CheckoutIn())


def test_failure_mid_transaction_leaves_no_partial_state(db, clock, monkeypatch):
    make_user(db, "u1")
    product = make_product(db)
    put_in_cart(db, "u1", product, 2)

    def boom(self, user_id):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(CartRepo, "clear_cart", boom)

    with pytest.raises(RuntimeError):
        OrderService(db, clock=clock).checkout("u1", CheckoutIn())

    assert db.query(OrderModel).count() == 0
    assert db.query(OrderItemModel).count() == 0
    assert db.query(CartItemModel).filter_by(user_id="u1").count() == 1


def test_checkout_does_not_touch_stock(db, clock):
    make_user(db, "u1")
    product = make_product(db, stock=5)
    put_in_cart(db, "u1", product, 2)

    OrderService(db, clock=clock).checkout("u1", CheckoutIn())

    db.refresh(product)
    assert product.stock == 5
