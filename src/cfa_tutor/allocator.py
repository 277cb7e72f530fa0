"""Planning horizon and per-topic minute budgets."""
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from cfa_tutor.config import MAX_DAILY_MINUTES, PlannerConfig
from cfa_tutor.errors import EmptySelectionError, InvalidRangeError, PlanTruncatedWarning
from cfa_tutor.models import StudyPlanGenerationOptions, WeakArea

logger = logging.getLogger(__name__)


@dataclass
class Allocation:
    days: list[date]
    daily_minutes: int
    budgets: dict[int, int] = field(default_factory=dict)  # topic_id -> minutes, ranking order
    requested_minutes: int = 0
    available_minutes: int = 0
    warning: Optional[PlanTruncatedWarning] = None

    @property
    def total_minutes(self) -> int:
        return sum(self.budgets.values())


def horizon_end(options: StudyPlanGenerationOptions) -> date:
    """Last planning day: the end date, or the exam date when that comes first."""
    if options.target_exam_date is not None and options.target_exam_date < options.end_date:
        return options.target_exam_date
    return options.end_date


def planning_days(options: StudyPlanGenerationOptions) -> list[date]:
    end = horizon_end(options)
    if end < options.start_date:
        raise InvalidRangeError(
            f"No study days between {options.start_date.isoformat()} and {end.isoformat()}"
        )
    count = (end - options.start_date).days + 1
    return [options.start_date + timedelta(days=i) for i in range(count)]


def apportion(weights: list[int], total: int) -> list[int]:
    """Split ``total`` proportionally to ``weights`` using largest remainders.

    The result always sums to ``total``; ties go to the earlier entry.
    """
    weight_sum = sum(weights)
    if weight_sum <= 0:
        raise ValueError("weights must sum to a positive number")
    shares = [w * total // weight_sum for w in weights]
    remainders = [w * total % weight_sum for w in weights]
    leftover = total - sum(shares)
    for i in sorted(range(len(weights)), key=lambda i: (-remainders[i], i))[:leftover]:
        shares[i] += 1
    return shares


def _scale_down(weights: list[int], requested: list[int], available: int) -> list[int]:
    shares = apportion(requested, available)
    if min(shares) > 0:
        return shares
    # Keep every topic in the plan with at least one minute.
    extra = apportion(weights, available - len(weights))
    return [1 + e for e in extra]


def allocate_minutes(
    focus_areas: list[WeakArea],
    days: list[date],
    daily_study_time: int | None = None,
    config: PlannerConfig | None = None,
) -> Allocation:
    """Compute each focus area's total minutes over the horizon.

    Requests are proportional to priority weight. If they exceed the
    available time, all of them are scaled down together and the
    allocation carries a PlanTruncatedWarning.
    """
    config = config or PlannerConfig()
    if not focus_areas:
        raise EmptySelectionError("No focus areas to allocate time to")
    if not days:
        raise InvalidRangeError("No study days available in the planning horizon")

    daily = config.default_daily_minutes if daily_study_time is None else daily_study_time
    if not 0 < daily <= MAX_DAILY_MINUTES:
        raise InvalidRangeError(f"Daily study time must be between 1 and {MAX_DAILY_MINUTES} minutes")

    available = len(days) * daily
    if available < len(focus_areas):
        raise InvalidRangeError(
            f"{available} minutes cannot cover {len(focus_areas)} focus areas"
        )

    weights = [config.priority_weights[a.priority] for a in focus_areas]
    requested = [w * config.minutes_per_weight for w in weights]
    requested_total = sum(requested)

    warning = None
    if requested_total > available:
        minutes = _scale_down(weights, requested, available)
        warning = PlanTruncatedWarning(requested_total, available)
        logger.warning(str(warning))
    elif config.fill_horizon:
        minutes = apportion(weights, available)
    else:
        minutes = requested

    return Allocation(
        days=list(days),
        daily_minutes=daily,
        budgets={a.topic_id: m for a, m in zip(focus_areas, minutes)},
        requested_minutes=requested_total,
        available_minutes=available,
        warning=warning,
    )
