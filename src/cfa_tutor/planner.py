"""Study plan generation entry point."""
import logging

from cfa_tutor.allocator import allocate_minutes, planning_days
from cfa_tutor.assembler import assemble_sessions
from cfa_tutor.config import MAX_DAILY_MINUTES, PlannerConfig, load_config
from cfa_tutor.errors import InvalidInputError, InvalidRangeError
from cfa_tutor.models import ProgressRecord, StudyPlan, StudyPlanGenerationOptions, Topic
from cfa_tutor.proficiency import estimate_weak_areas
from cfa_tutor.progress import get_topics, get_user_progress
from cfa_tutor.selector import (
    select_focus_areas, validate_focus_areas, validate_topic_filters, with_details,
)

logger = logging.getLogger(__name__)


def default_plan_name(options: StudyPlanGenerationOptions) -> str:
    return f"CFA Level I Study Plan ({options.start_date.isoformat()})"


def validate_options(options: StudyPlanGenerationOptions, catalog: list[Topic]) -> None:
    """Reject requests that can never produce a plan."""
    if options.start_date is None or options.end_date is None:
        raise InvalidInputError("Both start_date and end_date are required")
    validate_topic_filters(options, catalog)
    if not options.generate_from_user_progress and not options.focus_areas:
        raise InvalidInputError("focus_areas are required when not generating from user progress")
    if options.start_date > options.end_date:
        raise InvalidRangeError(
            f"start_date {options.start_date.isoformat()} is after end_date {options.end_date.isoformat()}"
        )
    if options.daily_study_time is not None and not 0 < options.daily_study_time <= MAX_DAILY_MINUTES:
        raise InvalidRangeError(
            f"daily_study_time must be between 1 and {MAX_DAILY_MINUTES} minutes, got {options.daily_study_time}"
        )


def generate_plan(
    options: StudyPlanGenerationOptions,
    progress: list[ProgressRecord],
    catalog: list[Topic],
    config: PlannerConfig | None = None,
) -> StudyPlan:
    """Build a complete study plan or raise a PlannerError.

    Explicit ``options.focus_areas`` replace estimation from ``progress``
    entirely. A plan whose requests had to be scaled down to fit the
    horizon is still returned, with a PlanTruncatedWarning in ``warnings``.
    """
    config = config or PlannerConfig()
    validate_options(options, catalog)

    if options.focus_areas:
        validate_focus_areas(options.focus_areas, catalog)
        candidates = list(options.focus_areas)
    else:
        candidates = estimate_weak_areas(progress, catalog, config)

    focus = select_focus_areas(candidates, options, catalog, config)
    days = planning_days(options)
    allocation = allocate_minutes(focus, days, options.daily_study_time, config)
    detailed = with_details(focus, catalog)
    sessions = assemble_sessions(allocation, detailed, config)

    plan = StudyPlan(
        name=options.name or default_plan_name(options),
        start_date=days[0],
        end_date=days[-1],
        daily_study_time=allocation.daily_minutes,
        target_exam_date=options.target_exam_date,
        focus_areas=detailed,
        included_topics=list(options.included_topics),
        excluded_topics=list(options.excluded_topics),
        sessions=sessions,
        warnings=[allocation.warning] if allocation.warning else [],
    )
    logger.info(
        "Generated plan %r: %d sessions, %d minutes over %d days for %d focus areas",
        plan.name, len(sessions), plan.total_minutes, len(days), len(focus),
    )
    return plan


def generate_plan_for_user(db_path: str, user_id: int, options: StudyPlanGenerationOptions) -> StudyPlan:
    """Generate a plan from the stored catalog, progress and planner settings."""
    return generate_plan(
        options,
        get_user_progress(db_path, user_id),
        get_topics(db_path),
        load_config(db_path),
    )
