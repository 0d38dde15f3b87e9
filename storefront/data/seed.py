# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel, UserModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    {"name": "Keyboard", "price": Decimal("199.99"), "discount_percent": 0, "stock": 25},
    {"name": "Mouse", "price": Decimal("49.50"), "discount_percent": 10, "stock": 40},
    {"name": "Monitor", "price": Decimal("899.00"), "discount_percent": 15, "stock": 5},
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return
        db.add(
            UserModel(
                id="demo-user",
                email="demo@example.com",
                role="user",
                default_recipient_name="Demo User",
                default_phone="0800000000",
                default_address="1 Demo Street",
                default_postal_code="00000",
            )
        )
        db.add_all(ProductModel(**p) for p in DEMO_PRODUCTS)
        db.commit()
        logger.info(f"Seeded {len(DEMO_PRODUCTS)} products and demo user")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
