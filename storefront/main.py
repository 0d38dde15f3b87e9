# storefront/main.py
from fastapi import FastAPI
from storefront.data.database import Base, engine
from storefront.api.routers import health, carts, orders, payments
from storefront.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)

# import wszystkich modeli przed create_all
from storefront.data.models import UserModel, ProductModel, CartItemModel, OrderModel, OrderItemModel  # noqa: E402,F401

logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Orders",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(payments.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
