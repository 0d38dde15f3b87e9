# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_paid(user_id: str, order_id: int):
        """
        Powiadomienie o oplaceniu zamowienia, wolane dopiero po commicie.
        """
        send_order_paid_task.delay(user_id, order_id)


@celery_app.task(name="storefront.services.notification_service.send_order_paid_task")
def send_order_paid_task(user_id: str, order_id: int):
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} has been paid")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
