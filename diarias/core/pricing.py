"""Work-day pricing and money display."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from .models import Employee, WorkDayType

Number = Union[Decimal, int, float]


def _dec(x: Number) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x))


def price(
    day_type: WorkDayType,
    extra_hours: Optional[int],
    daily_rate: Number,
    party_rate: Number,
    extra_hour_rate: Number,
) -> Decimal:
    """Base rate for the day type plus overtime.

    Missing ``extra_hours`` counts as zero. Inputs are not validated and no
    rounding is applied.
    """
    base = _dec(daily_rate) if day_type == WorkDayType.COMUM else _dec(party_rate)
    return base + (extra_hours or 0) * _dec(extra_hour_rate)


def price_for(employee: Employee, day_type: WorkDayType, extra_hours: Optional[int] = 0) -> Decimal:
    """Price a day with the employee's current rate card."""
    return price(
        day_type,
        extra_hours,
        employee.daily_rate,
        employee.party_rate,
        employee.extra_hour_rate,
    )


def format_brl(value: Number) -> str:
    """Format as Brazilian reais, e.g. ``R$ 1.234,56``."""
    amount = _dec(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount):,.2f}"  # 1,234.56
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"
