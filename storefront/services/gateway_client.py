# storefront/services/gateway_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    MIDTRANS_SERVER_KEY,
    MIDTRANS_IS_PRODUCTION,
    SNAP_BASE_URL,
    GATEWAY_TIMEOUT_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SANDBOX_URL = "https://app.sandbox.midtrans.com"
PRODUCTION_URL = "https://app.midtrans.com"


class SnapClient:
    """
    Klient Midtrans Snap.
    create_transaction -> {"token": ..., "redirect_url": ...}
    Bledy transportu i HTTP ida dalej jako requests.RequestException.
    """

    def __init__(
        self,
        server_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self.server_key = server_key if server_key is not None else MIDTRANS_SERVER_KEY
        default_url = SNAP_BASE_URL or (PRODUCTION_URL if MIDTRANS_IS_PRODUCTION else SANDBOX_URL)
        self.base_url = (base_url or default_url).rstrip("/")
        self.timeout = timeout or GATEWAY_TIMEOUT_SECONDS

    @http_retry()
    def create_transaction(self, payload: dict) -> dict:
        url = f"{self.base_url}/snap/v1/transactions"
        order_ref = payload.get("transaction_details", {}).get("order_id")
        logger.info(f"SnapClient POST {url} order_id={order_ref}")

        resp = requests.post(
            url,
            json=payload,
            auth=(self.server_key, ""),
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
