# storefront/api/deps.py
from fastapi import Header, HTTPException

from storefront.domain.errors import StoreError
from storefront.domain.schemas import Identity
from storefront.services.gateway_client import SnapClient


def get_identity(
    user_id: str | None = Header(default=None, alias="X-User-Id"),
    role: str | None = Header(default=None, alias="X-User-Role"),
) -> Identity:
    """Tozsamosc ustawiona przez upstream auth, tu jej nie weryfikujemy."""
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return Identity(id=user_id, role=role or "user")


def get_gateway() -> SnapClient:
    return SnapClient()


def to_http(e: StoreError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.detail)
