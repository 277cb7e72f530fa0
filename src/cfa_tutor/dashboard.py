"""Proficiency labels, study statistics and plan summaries."""
from datetime import date

from cfa_tutor.config import PlannerConfig
from cfa_tutor.plans import completion_percentage, get_plan_items, group_items
from cfa_tutor.proficiency import priority_for
from cfa_tutor.progress import get_topic_scores

PRIORITY_LABELS = {3: "HIGH", 2: "MEDIUM", 1: "LOW"}


def get_proficiency_label(score: float, attempted: int = 1, config: PlannerConfig | None = None) -> str:
    if attempted == 0:
        return "NOT STARTED"
    priority = priority_for(score, config)
    if priority == 1:
        return "STRONG"
    elif priority == 2:
        return "DEVELOPING"
    return "WEAK"


def get_proficiency_color(score: float, attempted: int = 1, config: PlannerConfig | None = None) -> str:
    if attempted == 0:
        return "dim"
    priority = priority_for(score, config)
    if priority == 1:
        return "green"
    elif priority == 2:
        return "yellow"
    return "red"


def get_study_stats(db_path: str, user_id: int) -> dict:
    scores = get_topic_scores(db_path, user_id)
    attempted = sum(s["attempted"] for s in scores)
    correct = sum(s["correct"] for s in scores)
    practiced = [s for s in scores if s["attempted"]]
    weakest = min(practiced, key=lambda s: (s["accuracy"], s["topic_id"])) if practiced else None
    return {
        "topics_practiced": len(practiced),
        "topics_total": len(scores),
        "questions_attempted": attempted,
        "accuracy": round(correct / attempted * 100, 1) if attempted else 0.0,
        "hours_spent": round(sum(s["time_spent"] for s in scores) / 3600, 1),
        "weakest_topic": weakest["name"] if weakest else None,
    }


def get_plan_summary(db_path: str, plan_id: int, today: date | None = None) -> dict:
    items = get_plan_items(db_path, plan_id)
    groups = group_items(items, today)
    return {
        "sessions": len(items),
        "completion": completion_percentage(items),
        "minutes_total": sum(i.duration_minutes for i in items),
        "minutes_done": sum(i.duration_minutes for i in groups["completed"]),
        "overdue": len(groups["overdue"]),
        "today": len(groups["today"]),
        "upcoming": len(groups["upcoming"]),
    }
