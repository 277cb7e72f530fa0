"""Turn per-topic minute budgets into a day-by-day session schedule."""
from cfa_tutor.allocator import Allocation
from cfa_tutor.config import PlannerConfig
from cfa_tutor.models import FocusAreaWithDetails, StudySession

SESSION_KINDS = {3: "intensive review", 2: "targeted practice", 1: "maintenance review"}


def daily_quotas(total: int, day_count: int) -> list[int]:
    """Spread ``total`` minutes evenly, earlier days taking the remainder."""
    base, extra = divmod(total, day_count)
    return [base + 1 if i < extra else base for i in range(day_count)]


def session_title(area: FocusAreaWithDetails | None, topic_id: int) -> str:
    if area is None:
        return f"Topic {topic_id}"
    return f"{area.topic_name}: {SESSION_KINDS.get(area.priority, 'review')}"


def assemble_sessions(
    allocation: Allocation,
    focus_areas: list[FocusAreaWithDetails],
    config: PlannerConfig | None = None,
) -> list[StudySession]:
    """Emit sessions day by day, rotating through topics in ranking order.

    Each turn gives a topic at most one block of time. The rotation
    continues across days so lower-ranked topics are not starved, and
    repeated turns for a topic on the same day collapse into one session.
    """
    config = config or PlannerConfig()
    details = {a.topic_id: a for a in focus_areas}
    topics = list(allocation.budgets)
    remaining = dict(allocation.budgets)
    quotas = daily_quotas(allocation.total_minutes, len(allocation.days))

    sessions = []
    cursor = 0
    for day, quota in zip(allocation.days, quotas):
        served: dict[int, int] = {}
        left = quota
        while left > 0:
            for step in range(len(topics)):
                idx = (cursor + step) % len(topics)
                if remaining[topics[idx]] > 0:
                    break
            topic_id = topics[idx]
            chunk = min(config.session_block_minutes, remaining[topic_id], left)
            remaining[topic_id] -= chunk
            left -= chunk
            served[topic_id] = served.get(topic_id, 0) + chunk
            cursor = (idx + 1) % len(topics)
        for topic_id, minutes in served.items():
            sessions.append(StudySession(
                day=day,
                topic_id=topic_id,
                duration_minutes=minutes,
                title=session_title(details.get(topic_id), topic_id),
            ))
    return sessions
