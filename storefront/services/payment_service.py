# storefront/services/payment_service.py
from datetime import datetime
from typing import Any, Callable, Mapping

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import (
    ConflictError,
    ExpiredError,
    GatewayError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from storefront.domain.expiry import ORDER_WINDOW_MINUTES, as_utc, is_past_window, utc_now
from storefront.domain.lifecycle import OrderEvent, OrderStatus, Transition
from storefront.domain.notifications import build_order_ref, parse_notification
from storefront.domain.pricing import gross_amount
from storefront.domain.schemas import WebhookAck
from storefront.repos.order_repo import OrderRepo
from storefront.services.gateway_client import SnapClient
from storefront.services.notification_service import NotificationService
from storefront.services.order_lifecycle import OrderLifecycle
from storefront.services.order_service import SHIPPING_FIELDS
from storefront.utils.retry import db_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def format_gateway_time(value: datetime) -> str:
    """Format bramki: 'YYYY-MM-DD HH:MM:SS +0000' (zawsze UTC)."""
    return as_utc(value).strftime("%Y-%m-%d %H:%M:%S +0000")


class PaymentService:
    """
    Platnosci:
    - initiate: token sesji platnosci dla zamowienia pending
    - handle_notification: webhook z bramki -> przejscie maszyny stanow
    """

    def __init__(
        self,
        db: Session,
        gateway: SnapClient,
        notifier: NotificationService | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.lifecycle = OrderLifecycle(db)
        self.gateway = gateway
        self.notifier = notifier or NotificationService()
        self.clock = clock

    def initiate(self, order_id: int) -> dict:
        order = self._load_payable_order(order_id)
        now = self.clock()

        # kazda proba ma wlasny order_id w bramce, rozliczana na to samo zamowienie
        attempt_ref = build_order_ref(order.id, str(int(now.timestamp() * 1000)))
        payload = {
            "transaction_details": {
                "order_id": attempt_ref,
                "gross_amount": gross_amount(order.total),
            },
            # wygasniecie liczone od utworzenia zamowienia, nie od tej proby
            "expiry": {
                "start_time": format_gateway_time(order.created_at),
                "unit": "minutes",
                "duration": ORDER_WINDOW_MINUTES,
            },
        }

        try:
            response = self.gateway.create_transaction(payload)
        except requests.Timeout as e:
            logger.error(f"Order {order.id}: gateway timeout for {attempt_ref}: {e}")
            raise GatewayError("Payment gateway timed out, please retry") from e
        except requests.RequestException as e:
            logger.error(f"Order {order.id}: gateway error for {attempt_ref}: {e}")
            raise GatewayError("Payment gateway unavailable, please retry") from e

        token = (response or {}).get("token")
        if not token:
            logger.error(f"Order {order.id}: gateway response without token: {response}")
            raise GatewayError("Payment gateway returned no token")

        logger.info(f"Order {order.id}: payment session {attempt_ref} opened")
        return {"token": token, "redirect_url": response.get("redirect_url")}

    def handle_notification(self, payload: Mapping[str, Any] | None) -> WebhookAck:
        """
        Bramka dostarcza co najmniej raz, w dowolnej kolejnosci.
        Wszystko czego nie da sie rozwiazac potwierdzamy 200 i logujemy,
        wyjatek leci tylko przy bledzie wewnetrznym (wtedy bramka ponowi).
        """
        notification = parse_notification(payload)

        if not notification.external_ref:
            logger.info("Webhook without order_id (connectivity test), ignored")
            return WebhookAck(message="no order_id (test)")
        if notification.order_id is None:
            logger.warning(f"Webhook with unparseable order_id {notification.external_ref!r}, ignored")
            return WebhookAck(message="invalid order_id (ignored)")
        if not notification.actionable:
            logger.warning(
                f"Webhook for order {notification.order_id} with unrecognized status "
                f"{notification.raw_status!r}, ignored"
            )
            return WebhookAck(message="unrecognized status (ignored)")

        try:
            result = self._apply_notification(notification.order_id, notification.event)
        except SQLAlchemyError as e:
            logger.error(f"Webhook for order {notification.order_id} failed: {e}")
            raise InternalError("Failed to apply payment notification") from e

        if result is None:
            logger.warning(f"Webhook for unknown order {notification.order_id}, ignored")
            return WebhookAck(message="Order not found (ignored)")

        order, transition = result
        if transition.target is OrderStatus.PAID and transition.changed:
            self._notify_paid(order)
        if not transition.changed:
            return WebhookAck(message=f"already {transition.previous.value}")
        return WebhookAck()

    def _notify_paid(self, order: OrderModel):
        # zamowienie juz zatwierdzone, blad kolejki nie cofa potwierdzenia dla bramki
        try:
            self.notifier.send_order_paid(order.user_id, order.id)
        except Exception:
            logger.exception(f"Order {order.id}: failed to enqueue paid notification")

    @db_retry()
    def _apply_notification(
        self, order_id: int, event: OrderEvent
    ) -> tuple[OrderModel, Transition] | None:
        # blokada wiersza zamowienia -> "juz oplacone?" i zdjecie ze stanu w jednej transakcji
        try:
            order = self.repo.get_order_for_update(order_id)
            if order is None:
                self.repo.rollback()
                return None

            if event is OrderEvent.SETTLED and order.status == OrderStatus.EXPIRED.value:
                logger.warning(f"Order {order.id}: settlement received for expired order")

            transition = self.lifecycle.apply(order, event, self.clock())
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        return order, transition

    def _load_payable_order(self, order_id: int) -> OrderModel:
        try:
            order = self.repo.get_order_for_update(order_id)
            if not order:
                raise NotFoundError("Order not found")
            if order.status != OrderStatus.PENDING.value:
                raise ConflictError("Order already processed", current_status=order.status)

            missing = [name for name in SHIPPING_FIELDS if not (getattr(order, name) or "").strip()]
            if missing:
                raise ValidationError(
                    f"Address is required before payment; missing: {', '.join(missing)}"
                )

            now = self.clock()
            if is_past_window(order.created_at, now):
                self.lifecycle.apply(order, OrderEvent.WINDOW_ELAPSED, now)
                self.repo.commit()
                raise ExpiredError("Order expired (exceeded 15 minutes from creation)")

            # blokada nie jest potrzebna na czas wywolania bramki
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        return order
