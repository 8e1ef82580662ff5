"""Search, ordering and monthly figures over the live roster.

Everything here is recomputed from the employees passed in; nothing is cached
between calls.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from .models import Employee, WorkDay, WorkDayType
from .months import Month

SORT_KEYS = ("name", "artisticName", "level")


def _collation_key(text: str) -> str:
    # Accent- and case-insensitive, so "Álvaro" sorts with "alvaro"
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def filter_employees(employees: Iterable[Employee], term: str) -> List[Employee]:
    """Employees whose name or artistic name contains ``term``, ignoring case."""
    needle = (term or "").casefold()
    return [
        e
        for e in employees
        if needle in e.name.casefold() or needle in e.artistic_name.casefold()
    ]


def sort_employees(
    employees: Iterable[Employee], key: str = "name", descending: bool = False
) -> List[Employee]:
    if key == "name":
        sort_key = lambda e: (_collation_key(e.name), e.name)
    elif key in ("artisticName", "artistic_name"):
        sort_key = lambda e: (_collation_key(e.artistic_name), e.artistic_name)
    elif key == "level":
        sort_key = lambda e: e.level.rank
    else:
        raise ValueError(f"unknown sort key {key!r}; expected one of {', '.join(SORT_KEYS)}")
    return sorted(employees, key=sort_key, reverse=descending)


def visible_employees(
    employees: Iterable[Employee], term: str = "", key: str = "name", descending: bool = False
) -> List[Employee]:
    """Filter first, then sort."""
    return sort_employees(filter_employees(employees, term), key, descending)


def monthly_work_days(employee: Employee, month: Month) -> List[WorkDay]:
    """The month's work days in date order."""
    return sorted((wd for wd in employee.work_days if month.contains(wd.date)), key=lambda wd: wd.date)


def monthly_total(employee: Employee, month: Month) -> Decimal:
    return sum((wd.value for wd in monthly_work_days(employee, month)), Decimal("0"))


@dataclass(frozen=True)
class MonthlySummary:
    month: Month
    work_days: List[WorkDay]
    total: Decimal

    @property
    def day_count(self) -> int:
        return len(self.work_days)

    @property
    def party_days(self) -> int:
        return sum(1 for wd in self.work_days if wd.type == WorkDayType.FESTA)

    @property
    def extra_hours(self) -> int:
        return sum(wd.extra_hours or 0 for wd in self.work_days)


def monthly_summary(employee: Employee, month: Month) -> MonthlySummary:
    days = monthly_work_days(employee, month)
    return MonthlySummary(month=month, work_days=days, total=sum((wd.value for wd in days), Decimal("0")))
