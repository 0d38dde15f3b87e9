# storefront/services/order_lifecycle.py
from datetime import datetime

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.lifecycle import OrderEvent, OrderStatus, Transition, apply_event
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderLifecycle:
    """
    Wykonuje przejscia maszyny stanow wraz z efektami ubocznymi.
    Nie robi commita - wywolujacy trzyma transakcje i blokade wiersza zamowienia
    (get_order_for_update), wiec sprawdzenie "juz oplacone?" i zdjecie ze stanu
    dzieja sie atomowo.
    """

    def __init__(self, db: Session):
        self.products = ProductRepo(db)

    def apply(self, order: OrderModel, event: OrderEvent, now: datetime) -> Transition:
        transition = apply_event(OrderStatus(order.status), event)

        if not transition.changed:
            logger.info(
                f"Order {order.id}: event {event.value} ignored in status {transition.previous.value}"
            )
            return transition

        if transition.decrement_stock:
            for item in order.items:
                if self.products.decrement_stock(item.product_id, item.quantity) == 0:
                    logger.warning(
                        f"Order {order.id}: product {item.product_id} missing, stock not decremented"
                    )

        if transition.stamp_paid_at and order.paid_at is None:
            order.paid_at = now

        order.status = transition.target.value
        logger.info(
            f"Order {order.id}: {transition.previous.value} -> {transition.target.value} ({event.value})"
        )
        return transition
