# storefront/domain/lifecycle.py
"""
Maszyna stanow zamowienia.

pending -> paid | expired | cancelled, wszystkie trzy sa koncowe.
Jedna funkcja przejscia (stan, zdarzenie) -> Transition, efekty uboczne
(zdjecie stanu magazynu, paid_at) opisane flagami, wykonuje je serwis.
"""
from dataclasses import dataclass
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    EXPIRED = "expired"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.PENDING


class OrderEvent(str, Enum):
    SETTLED = "settled"  # bramka: capture / settlement
    GATEWAY_EXPIRED = "gateway_expired"
    GATEWAY_CANCELLED = "gateway_cancelled"  # cancel / deny
    GATEWAY_PENDING = "gateway_pending"
    WINDOW_ELAPSED = "window_elapsed"  # lokalny zegar, 15 min od utworzenia


@dataclass(frozen=True)
class Transition:
    previous: OrderStatus
    target: OrderStatus
    decrement_stock: bool = False
    stamp_paid_at: bool = False

    @property
    def changed(self) -> bool:
        return self.previous is not self.target


_FROM_PENDING = {
    OrderEvent.SETTLED: OrderStatus.PAID,
    OrderEvent.GATEWAY_EXPIRED: OrderStatus.EXPIRED,
    OrderEvent.WINDOW_ELAPSED: OrderStatus.EXPIRED,
    OrderEvent.GATEWAY_CANCELLED: OrderStatus.CANCELLED,
    OrderEvent.GATEWAY_PENDING: OrderStatus.PENDING,
}


def apply_event(current: OrderStatus, event: OrderEvent) -> Transition:
    current = OrderStatus(current)

    # stany koncowe sa "lepkie", powtorzone albo spoznione zdarzenia nic nie zmieniaja
    if current.is_terminal:
        return Transition(previous=current, target=current)

    target = _FROM_PENDING[event]
    paid = target is OrderStatus.PAID
    return Transition(
        previous=current,
        target=target,
        decrement_stock=paid,
        stamp_paid_at=paid,
    )
