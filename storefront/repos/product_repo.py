# storefront/repos/product_repo.py
from sqlalchemy import case, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        Warunkowe zdjecie ze stanu w jednym UPDATE, nigdy ponizej zera.
        UPDATE products SET stock = CASE WHEN stock > q THEN stock - q ELSE 0 END WHERE id = ...
        Zwraca rowcount (0 gdy produkt nie istnieje).
        """
        stmt = (
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                stock=case(
                    (ProductModel.stock > quantity, ProductModel.stock - quantity),
                    else_=0,
                )
            )
            .execution_options(synchronize_session="fetch")
        )
        return self.db.execute(stmt).rowcount
