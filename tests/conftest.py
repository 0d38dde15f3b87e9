import os

# musi byc ustawione przed importem storefront
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["MIDTRANS_SERVER_KEY"] = "test-server-key"

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from storefront.api.deps import get_gateway  # noqa: E402
from storefront.data.database import Base, SessionLocal, engine  # noqa: E402
from storefront.data.models import CartItemModel, ProductModel, UserModel  # noqa: E402
from storefront.main import app  # noqa: E402

T0 = datetime(2026, 3, 1, 10, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeGateway:
    def __init__(self):
        self.calls: list[dict] = []
        self.error: Exception | None = None

    def create_transaction(self, payload: dict) -> dict:
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        token = f"tok-{len(self.calls)}"
        return {"token": token, "redirect_url": f"https://pay.example/{token}"}


class FakeNotifier:
    def __init__(self):
        self.sent: list[tuple[str, int]] = []

    def send_order_paid(self, user_id: str, order_id: int):
        self.sent.append((user_id, order_id))


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, user_id="u1", with_address=True, role="user"):
    user = UserModel(id=user_id, email=f"{user_id}@example.com", role=role)
    if with_address:
        user.default_recipient_name = "Budi"
        user.default_phone = "08123456789"
        user.default_address = "Jl. Merdeka 1"
        user.default_postal_code = "10110"
    db.add(user)
    db.commit()
    return user


def make_product(db, name="Product A", price="100", discount_percent=0, stock=5):
    product = ProductModel(
        name=name,
        price=Decimal(price),
        discount_percent=discount_percent,
        stock=stock,
    )
    db.add(product)
    db.commit()
    return product


def put_in_cart(db, user_id, product, quantity):
    db.add(CartItemModel(user_id=user_id, product_id=product.id, quantity=quantity))
    db.commit()
