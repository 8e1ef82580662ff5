"""Calendar-month value object used to scope work days."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

MONTH_NAMES_PT = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


@dataclass(frozen=True, order=True)
class Month:
    """A (year, month) pair; month is 1-based."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be within 1..12, got {self.month}")

    @classmethod
    def of(cls, day: date) -> "Month":
        return cls(day.year, day.month)

    @classmethod
    def current(cls, today: Optional[date] = None) -> "Month":
        return cls.of(today or date.today())

    @classmethod
    def parse(cls, text: str) -> "Month":
        """Parse ``YYYY-MM``."""
        try:
            year_text, month_text = text.strip().split("-")
            return cls(int(year_text), int(month_text))
        except ValueError as exc:
            raise ValueError(f"expected YYYY-MM, got {text!r}") from exc

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def day(self, number: int) -> date:
        return date(self.year, self.month, number)

    def days(self) -> List[date]:
        return [self.day(n) for n in range(1, self.days_in_month + 1)]

    def previous(self) -> "Month":
        if self.month == 1:
            return Month(self.year - 1, 12)
        return Month(self.year, self.month - 1)

    def next(self) -> "Month":
        if self.month == 12:
            return Month(self.year + 1, 1)
        return Month(self.year, self.month + 1)

    def label_pt(self) -> str:
        """``março de 2024``"""
        return f"{MONTH_NAMES_PT[self.month - 1]} de {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
