"""Weak-area filtering, validation and ranking."""
import logging

from cfa_tutor.config import PlannerConfig
from cfa_tutor.errors import EmptySelectionError, InvalidInputError
from cfa_tutor.models import FocusAreaWithDetails, StudyPlanGenerationOptions, Topic, WeakArea

logger = logging.getLogger(__name__)

VALID_PRIORITIES = (1, 2, 3)


def validate_topic_filters(options: StudyPlanGenerationOptions, catalog: list[Topic]) -> None:
    known = {t.id for t in catalog}
    for label, ids in (("included", options.included_topics), ("excluded", options.excluded_topics)):
        unknown = sorted(set(ids) - known)
        if unknown:
            raise InvalidInputError(f"Unknown {label} topics: {unknown}")
    overlap = sorted(set(options.included_topics) & set(options.excluded_topics))
    if overlap:
        raise InvalidInputError(f"Topics both included and excluded: {overlap}")


def validate_focus_areas(focus_areas: list[WeakArea], catalog: list[Topic]) -> None:
    """Check explicitly supplied focus areas against the catalog."""
    known = {t.id for t in catalog}
    seen = set()
    for area in focus_areas:
        if area.topic_id not in known:
            raise InvalidInputError(f"Focus area references unknown topic {area.topic_id}")
        if area.topic_id in seen:
            raise InvalidInputError(f"Duplicate focus area for topic {area.topic_id}")
        if area.priority not in VALID_PRIORITIES:
            raise InvalidInputError(f"Topic {area.topic_id}: priority must be 1, 2 or 3, got {area.priority}")
        if not 0 <= area.proficiency <= 100:
            raise InvalidInputError(
                f"Topic {area.topic_id}: proficiency must be within 0-100, got {area.proficiency}"
            )
        seen.add(area.topic_id)


def rank_focus_areas(focus_areas: list[WeakArea], catalog: list[Topic]) -> list[WeakArea]:
    """Highest priority first, weaker topics first within a priority."""
    order = {t.id: i for i, t in enumerate(catalog)}
    return sorted(
        focus_areas,
        key=lambda a: (-a.priority, a.proficiency, order.get(a.topic_id, len(order)), a.topic_id),
    )


def select_focus_areas(
    weak_areas: list[WeakArea],
    options: StudyPlanGenerationOptions,
    catalog: list[Topic],
    config: PlannerConfig | None = None,
) -> list[WeakArea]:
    """Filter by included/excluded topics, rank, and bound the focus list."""
    config = config or PlannerConfig()
    validate_topic_filters(options, catalog)

    excluded = set(options.excluded_topics)
    selected = [a for a in weak_areas if a.topic_id not in excluded]
    if options.included_topics:
        included = set(options.included_topics)
        selected = [a for a in selected if a.topic_id in included]
    if not selected:
        raise EmptySelectionError("No focus areas remain after applying topic filters")

    ranked = rank_focus_areas(selected, catalog)
    if config.max_focus_areas is not None and len(ranked) > config.max_focus_areas:
        logger.info("Limiting focus areas from %d to %d", len(ranked), config.max_focus_areas)
        ranked = ranked[:config.max_focus_areas]
    return ranked


def with_details(focus_areas: list[WeakArea], catalog: list[Topic]) -> list[FocusAreaWithDetails]:
    names = {t.id: t.name for t in catalog}
    return [
        FocusAreaWithDetails(
            topic_id=a.topic_id,
            priority=a.priority,
            topic_name=names[a.topic_id],
            proficiency=a.proficiency,
        )
        for a in focus_areas
    ]
