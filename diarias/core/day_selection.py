"""Editing state for one employee's month before it is saved."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Union

from .models import Employee, WorkDayType
from .months import Month
from .pricing import price_for
from .reconcile import DaySelection, selections_for_month

WEEKDAY_HEADERS_PT = ("Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb")


class MonthDraft:
    """Day-by-day selections for the displayed month.

    Clicking a day cycles it ``unset -> COMUM -> FESTA -> unset``. Extra hours
    can only be set on a selected day and go back to zero when it is unset.
    Nothing here talks to the store; ``selections`` feeds ``reconcile``.
    """

    def __init__(self, employee: Employee, month: Optional[Month] = None) -> None:
        self.employee = employee
        self.month = month or Month.current()
        self.active_day: Optional[date] = None
        self._selected: Dict[date, DaySelection] = {}
        self._seed()

    def _seed(self) -> None:
        self._selected = {
            date.fromisoformat(key): selection
            for key, selection in selections_for_month(self.employee, self.month).items()
        }
        self.active_day = None

    def _resolve(self, day: Union[int, date]) -> date:
        resolved = self.month.day(day) if isinstance(day, int) else day
        if not self.month.contains(resolved):
            raise ValueError(f"{resolved.isoformat()} is outside {self.month}")
        return resolved

    # ---- navigation ----

    def previous_month(self) -> None:
        self.month = self.month.previous()
        self._seed()

    def next_month(self) -> None:
        self.month = self.month.next()
        self._seed()

    def reset(self, employee: Optional[Employee] = None) -> None:
        """Discard edits and re-read the (possibly refreshed) employee."""
        if employee is not None:
            self.employee = employee
        self._seed()

    # ---- day state ----

    def state(self, day: Union[int, date]) -> Optional[WorkDayType]:
        selection = self._selected.get(self._resolve(day))
        return selection.type if selection else None

    def toggle(self, day: Union[int, date]) -> Optional[WorkDayType]:
        """Advance the day to its next state and return it (``None`` = unset)."""
        resolved = self._resolve(day)
        current = self._selected.get(resolved)
        if current is None:
            self._selected[resolved] = DaySelection(WorkDayType.COMUM, 0)
            self.active_day = resolved
        elif current.type == WorkDayType.COMUM:
            self._selected[resolved] = DaySelection(WorkDayType.FESTA, current.extra_hours)
            self.active_day = resolved
        else:
            del self._selected[resolved]
            if self.active_day == resolved:
                self.active_day = None
        return self.state(resolved)

    def set_extra_hours(self, hours: Union[int, str, None], day: Union[int, date, None] = None) -> int:
        """Set overtime on ``day`` (default: the active day).

        Blank, malformed and negative input become 0. Raises ``ValueError``
        when the day is not selected.
        """
        target = self._resolve(day) if day is not None else self.active_day
        if target is None or target not in self._selected:
            raise ValueError("extra hours need a selected day")
        try:
            parsed = int(str(hours).strip()) if hours is not None else 0
        except ValueError:
            parsed = 0
        parsed = max(parsed, 0)
        self._selected[target] = DaySelection(self._selected[target].type, parsed)
        return parsed

    # ---- views ----

    def selections(self) -> Dict[str, DaySelection]:
        return {day.isoformat(): selection for day, selection in sorted(self._selected.items())}

    def preview_total(self) -> Decimal:
        """What the month will be worth once saved with the current rate card."""
        return sum(
            (price_for(self.employee, s.type, s.extra_hours) for s in self._selected.values()),
            Decimal("0"),
        )

    def grid(self) -> List[Optional[int]]:
        """Sunday-first calendar cells: ``None`` placeholders, then day numbers."""
        # date.weekday(): Monday == 0; shift so Sunday leads
        leading = (self.month.first_day.weekday() + 1) % 7
        return [None] * leading + list(range(1, self.month.days_in_month + 1))
