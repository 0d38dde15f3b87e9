from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)

    price = Column(Numeric(12, 2), nullable=False)
    discount_percent = Column(Integer, nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint("discount_percent >= 0 AND discount_percent <= 100", name="ck_product_discount_range"),
    )
