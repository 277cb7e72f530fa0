from datetime import date, timedelta

import pytest

from cfa_tutor.allocator import allocate_minutes, apportion, planning_days, horizon_end
from cfa_tutor.config import PlannerConfig
from cfa_tutor.errors import EmptySelectionError, InvalidRangeError, PlanTruncatedWarning
from cfa_tutor.models import StudyPlanGenerationOptions, WeakArea


def days(n, start=date(2026, 3, 2)):
    return [start + timedelta(days=i) for i in range(n)]


def test_planning_days_inclusive():
    opts = StudyPlanGenerationOptions(start_date=date(2026, 3, 2), end_date=date(2026, 3, 6))
    assert planning_days(opts) == days(5)


def test_planning_days_single_day():
    opts = StudyPlanGenerationOptions(start_date=date(2026, 3, 2), end_date=date(2026, 3, 2))
    assert planning_days(opts) == [date(2026, 3, 2)]


def test_exam_date_clamps_horizon():
    opts = StudyPlanGenerationOptions(
        start_date=date(2026, 3, 2), end_date=date(2026, 3, 31), target_exam_date=date(2026, 3, 4),
    )
    assert horizon_end(opts) == date(2026, 3, 4)
    assert planning_days(opts) == days(3)


def test_later_exam_date_ignored():
    opts = StudyPlanGenerationOptions(
        start_date=date(2026, 3, 2), end_date=date(2026, 3, 4), target_exam_date=date(2026, 6, 1),
    )
    assert planning_days(opts) == days(3)


def test_exam_before_start_has_no_days():
    opts = StudyPlanGenerationOptions(
        start_date=date(2026, 3, 2), end_date=date(2026, 3, 10), target_exam_date=date(2026, 3, 1),
    )
    with pytest.raises(InvalidRangeError):
        planning_days(opts)


def test_apportion_exact_total():
    assert apportion([1, 1, 1], 10) == [4, 3, 3]
    assert apportion([3, 1], 300) == [225, 75]
    assert sum(apportion([7, 5, 3, 2], 101)) == 101


def test_allocation_proportional_to_priority():
    focus = [WeakArea(1, 20.0, 3), WeakArea(2, 90.0, 1)]
    allocation = allocate_minutes(focus, days(30), 60)
    assert allocation.budgets == {1: 360, 2: 120}
    assert allocation.requested_minutes == 480
    assert allocation.available_minutes == 1800
    assert allocation.warning is None


def test_allocation_keeps_ranking_order():
    focus = [WeakArea(3, 5.0, 3), WeakArea(1, 50.0, 2), WeakArea(2, 90.0, 1)]
    allocation = allocate_minutes(focus, days(30), 60)
    assert list(allocation.budgets) == [3, 1, 2]


def test_default_daily_time():
    allocation = allocate_minutes([WeakArea(1, 20.0, 3)], days(10))
    assert allocation.daily_minutes == 60
    assert allocation.available_minutes == 600


def test_truncation_scales_every_topic():
    focus = [WeakArea(1, 10.0, 3), WeakArea(2, 50.0, 2)]
    config = PlannerConfig(minutes_per_weight=100)
    allocation = allocate_minutes(focus, days(5), 60, config)
    assert allocation.requested_minutes == 500
    assert allocation.budgets == {1: 180, 2: 120}
    assert allocation.total_minutes == 300
    assert allocation.warning == PlanTruncatedWarning(500, 300)
    assert allocation.warning.scale == 0.6


def test_truncation_never_drops_a_topic():
    focus = [WeakArea(1, 0.0, 3), WeakArea(2, 90.0, 1)]
    allocation = allocate_minutes(focus, days(1), 2)
    assert allocation.budgets == {1: 1, 2: 1}
    assert allocation.warning is not None


def test_too_little_time_for_focus_areas():
    focus = [WeakArea(1, 0.0, 3), WeakArea(2, 0.0, 3)]
    with pytest.raises(InvalidRangeError):
        allocate_minutes(focus, days(1), 1)


def test_fill_horizon_uses_all_time():
    focus = [WeakArea(1, 20.0, 3), WeakArea(2, 90.0, 1)]
    config = PlannerConfig(minutes_per_weight=10, fill_horizon=True)
    allocation = allocate_minutes(focus, days(5), 60, config)
    assert allocation.budgets == {1: 225, 2: 75}
    assert allocation.warning is None


def test_empty_focus_list():
    with pytest.raises(EmptySelectionError):
        allocate_minutes([], days(5), 60)


def test_no_days():
    with pytest.raises(InvalidRangeError):
        allocate_minutes([WeakArea(1, 0.0, 3)], [], 60)


@pytest.mark.parametrize("daily", [0, -30, 1441])
def test_invalid_daily_time(daily):
    with pytest.raises(InvalidRangeError):
        allocate_minutes([WeakArea(1, 0.0, 3)], days(5), daily)
