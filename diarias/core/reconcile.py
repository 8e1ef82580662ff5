"""Month-at-a-time replacement of an employee's work days.

Editing a month never patches individual entries: the month's previous days
are dropped and every selected date is priced again from the employee's
current rate card. Days of other months are passed through untouched, so their
cached ``value`` keeps whatever rate card was current when they were saved.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Mapping, Union

from .models import Employee, WorkDay, WorkDayType
from .months import Month
from .pricing import price_for

DateKey = Union[str, date]


@dataclass(frozen=True)
class DaySelection:
    """What the user picked for one calendar day."""

    type: WorkDayType
    extra_hours: int = 0


def work_day_id(day: date) -> str:
    """Work days are keyed by their ISO date, one per calendar date."""
    return day.isoformat()


def _as_date(key: DateKey) -> date:
    return key if isinstance(key, date) else date.fromisoformat(key)


def split_by_month(work_days: List[WorkDay], month: Month) -> tuple[List[WorkDay], List[WorkDay]]:
    """Return ``(outside, inside)`` partitions of ``work_days`` for ``month``."""
    outside: List[WorkDay] = []
    inside: List[WorkDay] = []
    for work_day in work_days:
        (inside if month.contains(work_day.date) else outside).append(work_day)
    return outside, inside


def reconcile(
    employee: Employee,
    month_selections: Mapping[DateKey, DaySelection],
    target_month: Month,
) -> List[WorkDay]:
    """Build the employee's complete work-day list after editing ``target_month``.

    A date missing from ``month_selections`` ends up with no work day; a date
    present gets a freshly priced entry. Raises ``ValueError`` if a selection
    falls outside ``target_month``.
    """
    kept, _replaced = split_by_month(employee.work_days, target_month)

    fresh: Dict[date, WorkDay] = {}
    for key, selection in month_selections.items():
        day = _as_date(key)
        if not target_month.contains(day):
            raise ValueError(f"{day.isoformat()} is outside {target_month}")
        extra_hours = selection.extra_hours or 0
        fresh[day] = WorkDay(
            id=work_day_id(day),
            date=day,
            type=selection.type,
            extra_hours=extra_hours,
            value=price_for(employee, selection.type, extra_hours),
        )

    return kept + [fresh[day] for day in sorted(fresh)]


def remove_work_day(employee: Employee, day_id: str) -> List[WorkDay]:
    """The employee's work days without the entry ``day_id``."""
    return [work_day for work_day in employee.work_days if work_day.id != day_id]


def selections_for_month(employee: Employee, month: Month) -> Dict[str, DaySelection]:
    """Current selections of ``month``, keyed by ISO date, as an editor would seed them."""
    _outside, inside = split_by_month(employee.work_days, month)
    return {
        work_day.date.isoformat(): DaySelection(work_day.type, work_day.extra_hours or 0)
        for work_day in inside
    }
