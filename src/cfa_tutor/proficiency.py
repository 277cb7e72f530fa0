"""Per-topic proficiency and priority estimation from practice history."""
import logging

from cfa_tutor.config import PlannerConfig
from cfa_tutor.errors import InvalidInputError
from cfa_tutor.models import ProgressRecord, Topic, WeakArea

logger = logging.getLogger(__name__)


def priority_for(proficiency: float, config: PlannerConfig | None = None) -> int:
    """Map a 0-100 proficiency onto priority 3 (high) .. 1 (low)."""
    config = config or PlannerConfig()
    if proficiency < config.low_threshold:
        return 3
    if proficiency > config.high_threshold:
        return 1
    return 2


def _totals_by_topic(progress: list[ProgressRecord], catalog_ids: set[int]) -> dict[int, list[int]]:
    totals: dict[int, list[int]] = {}
    for record in progress:
        if record.topic_id not in catalog_ids:
            raise InvalidInputError(f"Progress record references unknown topic {record.topic_id}")
        if record.questions_attempted < 0 or record.questions_correct < 0:
            raise InvalidInputError(f"Negative progress counts for topic {record.topic_id}")
        if record.questions_correct > record.questions_attempted:
            raise InvalidInputError(
                f"Topic {record.topic_id}: {record.questions_correct} correct "
                f"out of {record.questions_attempted} attempted"
            )
        entry = totals.setdefault(record.topic_id, [0, 0])
        entry[0] += record.questions_attempted
        entry[1] += record.questions_correct
    return totals


def estimate_weak_areas(
    progress: list[ProgressRecord],
    catalog: list[Topic],
    config: PlannerConfig | None = None,
) -> list[WeakArea]:
    """Derive a WeakArea for every attempted topic, in catalog order.

    Topics with no attempts get ``config.unattempted_proficiency`` and
    ``config.unattempted_priority`` (0 and 3 by default) so they are
    scheduled for coverage, unless ``config.include_unattempted`` is off.
    """
    config = config or PlannerConfig()
    totals = _totals_by_topic(progress, {t.id for t in catalog})

    areas = []
    for topic in catalog:
        attempted, correct = totals.get(topic.id, (0, 0))
        if attempted == 0:
            if config.include_unattempted:
                areas.append(WeakArea(
                    topic.id, config.unattempted_proficiency, config.unattempted_priority,
                ))
            continue
        proficiency = round(correct / attempted * 100, 1)
        areas.append(WeakArea(topic.id, proficiency, priority_for(proficiency, config)))
    logger.debug("Estimated %d weak areas from %d progress records", len(areas), len(progress))
    return areas
