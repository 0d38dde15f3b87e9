# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_identity, to_http
from storefront.data.database import get_db
from storefront.domain.errors import StoreError
from storefront.domain.schemas import CartItemIn, CartOut, Identity
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    return CartService(db).get_cart(identity.id)


@router.post("/", response_model=CartOut)
def set_item(
    payload: CartItemIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    try:
        return CartService(db).set_quantity(identity.id, payload.product_id, payload.quantity)
    except StoreError as e:
        raise to_http(e)


@router.delete("/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    return CartService(db).remove_product(identity.id, product_id)


@router.delete("/", response_model=CartOut)
def clear_cart(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    return CartService(db).clear(identity.id)
