# storefront/gateway_mock/main.py
"""Lokalna atrapa Midtrans Snap do developmentu (SNAP_BASE_URL=http://localhost:8001)."""
from typing import Any, Dict
from uuid import uuid4

from fastapi import FastAPI, HTTPException

app = FastAPI(title="Snap Gateway (dev mock)")

SESSIONS: Dict[str, Dict[str, Any]] = {}


@app.post("/snap/v1/transactions", status_code=201)
def create_transaction(payload: Dict[str, Any]):
    details = payload.get("transaction_details") or {}
    order_id = details.get("order_id")
    if not order_id or details.get("gross_amount") is None:
        raise HTTPException(status_code=400, detail="transaction_details.order_id and gross_amount are required")
    # jak prawdziwa bramka: order_id moze byc uzyty tylko raz
    if order_id in SESSIONS:
        raise HTTPException(status_code=400, detail="transaction_details.order_id has already been taken")

    token = uuid4().hex
    SESSIONS[order_id] = {"token": token, "payload": payload}
    return {"token": token, "redirect_url": f"http://localhost:8001/snap/v2/vtweb/{token}"}
