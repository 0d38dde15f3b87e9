# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_identity, to_http
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import CheckoutIn, Identity, OrderOut, ShippingIn
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienie z koszyka i czysci koszyk (jedna transakcja).
    """
    try:
        return OrderService(db).checkout(identity.id, payload)
    except StoreError as e:
        raise to_http(e)


@router.get("/", response_model=List[OrderOut])
def my_orders(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    return OrderService(db).list_orders(identity.id)


@router.get("/all", response_model=List[OrderOut])
def all_orders(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    try:
        return OrderService(db).list_all_orders(identity)
    except StoreError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    try:
        return OrderService(db).get_order(order_id, identity)
    except StoreError as e:
        raise to_http(e)


@router.put("/{order_id}/shipping", response_model=OrderOut)
def update_shipping(
    order_id: int,
    payload: ShippingIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    try:
        return OrderService(db).update_shipping(order_id, identity.id, payload)
    except StoreError as e:
        raise to_http(e)
