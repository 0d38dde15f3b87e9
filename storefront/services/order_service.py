# storefront/services/order_service.py
from datetime import datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain.errors import (
    ConflictError,
    ExpiredError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from storefront.domain.expiry import is_past_window, utc_now
from storefront.domain.lifecycle import OrderEvent, OrderStatus
from storefront.domain.pricing import discounted_unit_price
from storefront.domain.schemas import Identity, ShippingIn
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.order_lifecycle import OrderLifecycle
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SHIPPING_FIELDS = ("recipient_name", "phone", "address", "postal_code")


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Checkout, zapytania, zmiana adresu dostawy.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.users = UserRepo(db)
        self.lifecycle = OrderLifecycle(db)
        self.clock = clock

    def checkout(self, user_id: str, shipping: ShippingIn) -> OrderModel:
        """
        Use Case: zamowienie z koszyka.

        1. Adres z body, puste pola z profilu uzytkownika
        2. Walidacja produktow i stanow magazynowych
        3. Zamrozenie cen (po rabacie) i total
        4. Jedna transakcja: zamowienie + pozycje + czyszczenie koszyka
        """
        fields = self._shipping_with_defaults(user_id, shipping)

        items = self.carts.get_cart_items(user_id)
        if not items:
            raise ValidationError("Cart is empty")

        for item in items:
            product = item.product
            if product is None:
                raise ValidationError(f"Product not found for item {item.product_id}")
            if product.stock <= 0:
                raise ValidationError(f"Product {product.name} out of stock")
            if item.quantity > product.stock:
                raise ValidationError(
                    f"Quantity for {product.name} exceeds stock ({product.stock})"
                )

        lines = [
            (item, discounted_unit_price(item.product.price, item.product.discount_percent))
            for item in items
        ]
        total = sum((price * item.quantity for item, price in lines), Decimal("0.00"))

        try:
            order = self.repo.add_order(
                OrderModel(
                    user_id=user_id,
                    status=OrderStatus.PENDING.value,
                    total=total,
                    created_at=self.clock(),
                    **{name: (value or None) for name, value in fields.items()},
                )
            )
            for item, price in lines:
                order.items.append(
                    OrderItemModel(product_id=item.product_id, quantity=item.quantity, price=price)
                )
            self.carts.clear_cart(user_id)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Checkout failed for user {user_id}: {e}")
            raise InternalError("Checkout failed") from e
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id} created for user {user_id}, total {total}")
        return order

    def get_order(self, order_id: int, identity: Identity) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if order.user_id != identity.id and not identity.is_admin:
            raise ForbiddenError("Forbidden")
        return order

    def list_orders(self, user_id: str) -> list[OrderModel]:
        return self.repo.list_orders_for_user(user_id)

    def list_all_orders(self, identity: Identity) -> list[OrderModel]:
        if not identity.is_admin:
            raise ForbiddenError("Admin only")
        return self.repo.list_all_orders()

    def update_shipping(self, order_id: int, user_id: str, shipping: ShippingIn) -> OrderModel:
        fields = {name: _clean(getattr(shipping, name)) for name in SHIPPING_FIELDS}
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ValidationError(
                "Shipping address is required (recipient_name, phone, address, postal_code); "
                f"missing: {', '.join(missing)}"
            )

        try:
            order = self.repo.get_order_for_update(order_id)
            if not order:
                raise NotFoundError("Order not found")
            if order.user_id != user_id:
                raise ForbiddenError("Forbidden")
            if order.status != OrderStatus.PENDING.value:
                raise ConflictError("Order already processed", current_status=order.status)

            now = self.clock()
            if is_past_window(order.created_at, now):
                self.lifecycle.apply(order, OrderEvent.WINDOW_ELAPSED, now)
                self.repo.commit()
                raise ExpiredError("Order expired (exceeded 15 minutes from creation)")

            for name, value in fields.items():
                setattr(order, name, value)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order.id}: shipping updated")
        return order

    def _shipping_with_defaults(self, user_id: str, shipping: ShippingIn) -> dict:
        profile = self.users.get_user(user_id)
        fields = {}
        for name in SHIPPING_FIELDS:
            value = _clean(getattr(shipping, name))
            if not value and profile is not None:
                value = _clean(getattr(profile, f"default_{name}"))
            fields[name] = value
        return fields
