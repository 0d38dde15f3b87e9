# storefront/api/routers/payments.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_gateway, get_identity, to_http
from storefront.data.database import get_db
from storefront.domain.errors import InternalError, StoreError
from storefront.domain.schemas import Identity, PayIn, PayOut, WebhookAck
from storefront.services.gateway_client import SnapClient
from storefront.services.payment_service import PaymentService
from storefront.utils.settings import MIDTRANS_CLIENT_KEY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/pay", response_model=PayOut)
def pay(
    payload: PayIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
    gateway: SnapClient = Depends(get_gateway),
):
    # platnosc po samym order_id, bez sprawdzania wlasciciela
    logger.info(f"User {identity.id} initiates payment for order {payload.order_id}")
    try:
        return PaymentService(db, gateway).initiate(payload.order_id)
    except StoreError as e:
        raise to_http(e)


@router.get("/webhook", response_model=WebhookAck)
def webhook_probe():
    return WebhookAck(message="ok")


@router.post("/webhook", response_model=WebhookAck)
def webhook(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    db: Session = Depends(get_db),
    gateway: SnapClient = Depends(get_gateway),
):
    """
    Powiadomienia z bramki. 200 dla wszystkiego poza bledem wewnetrznym,
    inaczej bramka ponawia w nieskonczonosc.
    """
    try:
        return PaymentService(db, gateway).handle_notification(payload)
    except InternalError as e:
        raise to_http(e)


@router.get("/public-key")
def public_key():
    if not MIDTRANS_CLIENT_KEY:
        raise HTTPException(status_code=500, detail="MIDTRANS_CLIENT_KEY not configured")
    return {"clientKey": MIDTRANS_CLIENT_KEY}
