from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.pricing import discounted_unit_price
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Koszyk uzytkownika - zbior par (produkt, ilosc) do checkoutu.
    commands (set, remove, clear) modyfikuja stan
    query (get) tylko odczyt
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart(self, user_id: str) -> Dict[str, Any]:
        items = self.repo.get_cart_items(user_id)

        lines = []
        total = Decimal("0.00")
        for i in items:
            unit_price = discounted_unit_price(i.product.price, i.product.discount_percent)
            total += unit_price * i.quantity
            lines.append(
                {
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "unit_price": unit_price,
                    "product": i.product,
                }
            )

        return {"user_id": user_id, "items": lines, "total": total}

    #commands
    def set_quantity(self, user_id: str, product_id: int, quantity: int) -> Dict[str, Any]:
        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        # ilosc <= 0 oznacza usuniecie pozycji
        if quantity <= 0:
            return self.remove_product(user_id, product_id)

        if product.stock <= 0:
            raise ValidationError("Product out of stock")
        if quantity > product.stock:
            raise ValidationError(f"Quantity exceeds available stock ({product.stock})")

        existing = self.repo.get_cart_item(user_id, product_id)
        if existing:
            logger.info(
                f"Cart of user {user_id}: product {product_id} quantity "
                f"{existing.quantity} -> {quantity}"
            )
            existing.quantity = quantity
        else:
            logger.info(f"Cart of user {user_id}: adding product {product_id} x{quantity}")
            self.repo.add_cart_item(
                CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
            )

        self.repo.commit()
        return self.get_cart(user_id)

    def remove_product(self, user_id: str, product_id: int) -> Dict[str, Any]:
        removed = self.repo.delete_cart_item(user_id, product_id)
        self.repo.commit()
        logger.info(f"Cart of user {user_id}: removed product {product_id} ({removed} row(s))")
        return self.get_cart(user_id)

    def clear(self, user_id: str) -> Dict[str, Any]:
        removed = self.repo.clear_cart(user_id)
        self.repo.commit()
        logger.info(f"Cart of user {user_id} cleared ({removed} row(s))")
        return self.get_cart(user_id)
