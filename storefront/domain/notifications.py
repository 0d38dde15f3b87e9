# storefront/domain/notifications.py
"""Parsowanie powiadomien (webhook) z bramki platnosci."""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from storefront.domain.lifecycle import OrderEvent

ORDER_REF_PREFIX = "ORDER-"

# ORDER-123, ORDER-123-1700000000000 albo samo 123
_ORDER_REF = re.compile(r"^(?:ORDER-)?(\d+)(?:-.*)?$")
# zakres kolumny Integer (INT4)
_MAX_ORDER_ID = 2**31 - 1


class NotificationKind(str, Enum):
    PAID = "paid"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PENDING = "pending"
    UNRECOGNIZED = "unrecognized"


_STATUS_TABLE = {
    "capture": NotificationKind.PAID,
    "settlement": NotificationKind.PAID,
    "expire": NotificationKind.EXPIRED,
    "expired": NotificationKind.EXPIRED,
    "cancel": NotificationKind.CANCELLED,
    "cancelled": NotificationKind.CANCELLED,
    "deny": NotificationKind.CANCELLED,
    "pending": NotificationKind.PENDING,
}

_KIND_TO_EVENT = {
    NotificationKind.PAID: OrderEvent.SETTLED,
    NotificationKind.EXPIRED: OrderEvent.GATEWAY_EXPIRED,
    NotificationKind.CANCELLED: OrderEvent.GATEWAY_CANCELLED,
    NotificationKind.PENDING: OrderEvent.GATEWAY_PENDING,
}


@dataclass(frozen=True)
class GatewayNotification:
    kind: NotificationKind
    order_id: int | None
    external_ref: str | None
    raw_status: str

    @property
    def event(self) -> OrderEvent | None:
        return _KIND_TO_EVENT.get(self.kind)

    @property
    def actionable(self) -> bool:
        return self.order_id is not None and self.event is not None


def build_order_ref(order_id: int, suffix: str | None = None) -> str:
    ref = f"{ORDER_REF_PREFIX}{order_id}"
    return f"{ref}-{suffix}" if suffix else ref


def extract_order_id(external_ref: Any) -> int | None:
    if external_ref is None:
        return None
    match = _ORDER_REF.match(str(external_ref).strip())
    if not match:
        return None
    order_id = int(match.group(1))
    if order_id <= 0 or order_id > _MAX_ORDER_ID:
        return None
    return order_id


def map_status(raw_status: Any) -> NotificationKind:
    return _STATUS_TABLE.get(str(raw_status or "").strip().lower(), NotificationKind.UNRECOGNIZED)


def parse_notification(payload: Mapping[str, Any] | None) -> GatewayNotification:
    payload = payload or {}
    external_ref = payload.get("order_id")
    raw_status = str(payload.get("transaction_status") or "")
    return GatewayNotification(
        kind=map_status(raw_status),
        order_id=extract_order_id(external_ref),
        external_ref=str(external_ref) if external_ref is not None else None,
        raw_status=raw_status,
    )
