# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class Identity(BaseModel):
    """Tozsamosc wywolujacego, juz zweryfikowana przez warstwe auth."""

    id: str
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class CartItemIn(BaseModel):
    """Schema dla ustawienia ilosci produktu w koszyku. quantity <= 0 usuwa pozycje."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(..., description="Ilosc produktu")


class ProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    discount_percent: int
    stock: int

    model_config = ConfigDict(from_attributes=True)


class CartItemOut(BaseModel):
    """Schema dla produktu w koszyku (response)."""

    product_id: int
    quantity: int
    unit_price: Decimal
    product: ProductOut


class CartOut(BaseModel):
    user_id: str
    items: List[CartItemOut]
    total: Decimal


class ShippingIn(BaseModel):
    recipient_name: str = ""
    phone: str = ""
    address: str = ""
    postal_code: str = ""


class CheckoutIn(ShippingIn):
    """Pola adresowe opcjonalne, puste biora wartosci domyslne z profilu."""


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: str
    status: str
    total: Decimal
    created_at: datetime
    paid_at: Optional[datetime] = None

    recipient_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    postal_code: Optional[str] = None

    items: List[OrderItemOut] = []

    model_config = ConfigDict(from_attributes=True)


class PayIn(BaseModel):
    order_id: int = Field(..., gt=0)


class PayOut(BaseModel):
    token: str
    redirect_url: Optional[str] = None


class WebhookAck(BaseModel):
    ok: bool = True
    message: str = "processed"
