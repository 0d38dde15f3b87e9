# storefront/repos/order_repo.py
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.lifecycle import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        # bez commita - zamowienie, pozycje i czyszczenie koszyka ida w jednej transakcji
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_for_update(self, order_id: int) -> OrderModel | None:
        """SELECT ... FOR UPDATE - serializuje rownolegle przejscia tego samego zamowienia."""
        stmt = (
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders_for_user(self, user_id: str) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_all_orders(self) -> list[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def lock_overdue_pending(self, cutoff: datetime) -> list[OrderModel]:
        """Zamowienia pending starsze niz cutoff, zablokowane wiersze sa pomijane."""
        stmt = (
            select(OrderModel)
            .where(
                OrderModel.status == OrderStatus.PENDING.value,
                OrderModel.created_at <= cutoff,
            )
            .with_for_update(skip_locked=True)
        )
        return list(self.db.execute(stmt).scalars().all())

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
