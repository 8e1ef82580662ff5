"""The month editor's per-day state machine."""
from datetime import date
from decimal import Decimal

import pytest

from diarias.core.day_selection import MonthDraft
from diarias.core.models import WorkDayType
from diarias.core.months import Month
from diarias.core.reconcile import DaySelection


def test_draft_is_seeded_from_the_month(rate_card_employee):
    draft = MonthDraft(rate_card_employee, Month(2024, 2))

    assert draft.selections() == {
        "2024-02-10": DaySelection(WorkDayType.FESTA, 0),
        "2024-02-11": DaySelection(WorkDayType.COMUM, 1),
    }
    assert draft.active_day is None


def test_toggle_cycles_unset_comum_festa_unset(rate_card_employee):
    draft = MonthDraft(rate_card_employee, Month(2024, 5))

    assert draft.toggle(7) == WorkDayType.COMUM
    assert draft.active_day == date(2024, 5, 7)
    assert draft.toggle(7) == WorkDayType.FESTA
    assert draft.toggle(7) is None
    assert draft.active_day is None
    assert draft.selections() == {}


def test_extra_hours_reset_when_day_is_unset(rate_card_employee):
    draft = MonthDraft(rate_card_employee, Month(2024, 5))
    draft.toggle(7)
    draft.set_extra_hours(3)
    draft.toggle(7)  # FESTA keeps the hours
    assert draft.selections()["2024-05-07"] == DaySelection(WorkDayType.FESTA, 3)

    draft.toggle(7)
    draft.toggle(7)

    assert draft.selections()["2024-05-07"] == DaySelection(WorkDayType.COMUM, 0)


def test_extra_hours_need_a_selected_day(rate_card_employee):
    draft = MonthDraft(rate_card_employee, Month(2024, 5))

    with pytest.raises(ValueError):
        draft.set_extra_hours(2)
    with pytest.raises(ValueError):
        draft.set_extra_hours(2, day=9)


@pytest.mark.parametrize(
    "raw, expected",
    [("4", 4), (" 2 ", 2), ("", 0), ("abc", 0), (-3, 0), (None, 0), (3.7, 0), ("3.7", 0)],
)
def test_extra_hours_input_is_sanitised(rate_card_employee, raw, expected):
    draft = MonthDraft(rate_card_employee, Month(2024, 5))
    draft.toggle(1)

    assert draft.set_extra_hours(raw) == expected


def test_navigation_reseeds_and_clears_active_day(rate_card_employee):
    draft = MonthDraft(rate_card_employee, Month(2024, 2))
    draft.toggle(20)

    draft.next_month()
    assert draft.month == Month(2024, 3)
    assert list(draft.selections()) == ["2024-03-01"]
    assert draft.active_day is None

    draft.previous_month()
    assert "2024-02-20" not in draft.selections()


def test_days_outside_the_month_are_refused(rate_card_employee):
    draft = MonthDraft(rate_card_employee, Month(2024, 2))
    with pytest.raises(ValueError):
        draft.toggle(date(2024, 3, 1))


def test_preview_total_uses_current_rates(rate_card_employee):
    draft = MonthDraft(rate_card_employee, Month(2024, 3))
    draft.toggle(5)
    draft.set_extra_hours(2)

    # 2024-03-01 re-priced at 100, plus 140
    assert draft.preview_total() == Decimal("240")


def test_grid_starts_on_the_right_weekday(rate_card_employee):
    # 1 March 2024 was a Friday: five blank cells Sun..Thu
    cells = MonthDraft(rate_card_employee, Month(2024, 3)).grid()

    assert cells[:6] == [None, None, None, None, None, 1]
    assert cells[-1] == 31
