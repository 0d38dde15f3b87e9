# storefront/domain/errors.py
"""Bledy domenowe - kazdy niesie kod HTTP, routery tlumacza je na HTTPException."""


class StoreError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class ValidationError(StoreError):
    status_code = 400


class NotFoundError(StoreError):
    status_code = 404


class ForbiddenError(StoreError):
    status_code = 403


class ConflictError(StoreError):
    """Zadanie niezgodne z aktualnym stanem zamowienia."""

    status_code = 409

    def __init__(self, detail: str, current_status: str | None = None):
        self.current_status = current_status
        super().__init__(detail)


class ExpiredError(StoreError):
    status_code = 400


class GatewayError(StoreError):
    """Timeout albo blad bramki platnosci - klient moze ponowic."""

    status_code = 502


class InternalError(StoreError):
    status_code = 500
