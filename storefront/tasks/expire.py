# storefront/tasks/expire.py
from datetime import datetime

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.domain.expiry import ORDER_WINDOW, utc_now
from storefront.domain.lifecycle import OrderEvent
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_lifecycle import OrderLifecycle
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def expire_overdue_orders(db: Session, now: datetime | None = None) -> list[int]:
    """Przenosi zamowienia pending po oknie 15 min do expired, zwraca ich ID."""
    now = now or utc_now()
    repo = OrderRepo(db)
    lifecycle = OrderLifecycle(db)

    try:
        orders = repo.lock_overdue_pending(now - ORDER_WINDOW)
        logger.info(f"Found {len(orders)} orders to expire")

        expired = []
        for order in orders:
            if lifecycle.apply(order, OrderEvent.WINDOW_ELAPSED, now).changed:
                expired.append(order.id)
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    return expired


@celery_app.task(name="storefront.tasks.expire.expire_orders_task")
def expire_orders_task():
    logger.info("Expire orders task started")

    db = SessionLocal()
    try:
        return expire_overdue_orders(db)
    finally:
        db.close()
