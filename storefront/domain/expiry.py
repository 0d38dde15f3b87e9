# storefront/domain/expiry.py
from datetime import datetime, timedelta, timezone

# okno platnosci, stale - bramka dostaje te sama wartosc w expiry.duration
ORDER_WINDOW = timedelta(minutes=15)
ORDER_WINDOW_MINUTES = 15


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # sqlite zwraca naiwne daty, zapisujemy zawsze w UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def window_closes_at(created_at: datetime) -> datetime:
    return as_utc(created_at) + ORDER_WINDOW


def is_past_window(created_at: datetime, now: datetime) -> bool:
    return as_utc(now) - as_utc(created_at) >= ORDER_WINDOW
