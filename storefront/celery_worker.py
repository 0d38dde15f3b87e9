# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    ORDER_SWEEP_INTERVAL_SECONDS,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# Explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "storefront.tasks.expire",
    "storefront.services.notification_service",
)

celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
celery_app.conf.timezone = "UTC"

# sweep jest opcjonalny, wygasanie i tak sprawdzane przy platnosci / zmianie adresu
if ORDER_SWEEP_INTERVAL_SECONDS > 0:
    celery_app.conf.beat_schedule = {
        "expire-orders": {
            "task": "storefront.tasks.expire.expire_orders_task",
            "schedule": float(ORDER_SWEEP_INTERVAL_SECONDS),
        },
    }
