# storefront/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def discounted_unit_price(price, discount_percent) -> Decimal:
    """Cena jednostkowa po rabacie, rabat obciety do 0..100, zaokraglona do groszy."""
    base = Decimal(str(price or 0))
    if base <= 0:
        return Decimal("0.00")
    pct = max(0, min(100, int(discount_percent or 0)))
    discounted = base * (Decimal(100 - pct) / Decimal(100))
    return max(Decimal("0.00"), discounted.quantize(CENT, rounding=ROUND_HALF_UP))


def gross_amount(total: Decimal):
    # bramka przyjmuje liczbe, calkowite kwoty wysylamy jako int
    total = Decimal(total)
    if total == total.to_integral_value():
        return int(total)
    return float(total)
