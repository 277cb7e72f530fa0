# tests/test_integration.py
"""End-to-end test of the core workflow."""
from datetime import date, timedelta

from cfa_tutor.db import init_db
from cfa_tutor.seed import seed_all
from cfa_tutor.config import save_config_value
from cfa_tutor.progress import record_answer
from cfa_tutor.models import StudyPlanGenerationOptions
from cfa_tutor.planner import generate_plan_for_user
from cfa_tutor.plans import (
    save_plan, get_plan, get_plan_items, set_item_completed, group_items, list_plans,
)
from cfa_tutor.dashboard import get_plan_summary, get_study_stats


def test_full_planning_workflow(tmp_db):
    """Practice, plan, study and track progress against the plan."""
    # Setup
    init_db(tmp_db)
    seed_all(tmp_db)
    save_config_value(tmp_db, "include_unattempted", "false")

    # Practice: weak in Ethics, middling in Economics, strong in Equity
    for i in range(10):
        record_answer(tmp_db, 1, 1, is_correct=i < 3, time_spent=90)
        record_answer(tmp_db, 1, 3, is_correct=i < 6, time_spent=90)
        record_answer(tmp_db, 1, 6, is_correct=i < 9, time_spent=90)
    stats = get_study_stats(tmp_db, 1)
    assert stats["topics_practiced"] == 3
    assert stats["weakest_topic"] == "Ethical and Professional Standards"

    # Plan two weeks at 45 minutes a day
    start = date(2026, 4, 6)
    options = StudyPlanGenerationOptions(
        name="Spring push", start_date=start, end_date=start + timedelta(days=13),
        daily_study_time=45,
    )
    plan = generate_plan_for_user(tmp_db, 1, options)
    assert [a.topic_id for a in plan.focus_areas] == [1, 3, 6]
    assert [a.priority for a in plan.focus_areas] == [3, 2, 1]
    minutes = plan.minutes_by_topic()
    assert minutes == {1: 315, 3: 210, 6: 105}
    assert plan.warnings

    plan_id = save_plan(tmp_db, 1, plan)
    assert get_plan(tmp_db, plan_id) == plan

    # Work through the first three days
    items = get_plan_items(tmp_db, plan_id)
    for item in items:
        if item.scheduled_date < start + timedelta(days=3):
            set_item_completed(tmp_db, item.id)

    today = start + timedelta(days=4)
    groups = group_items(get_plan_items(tmp_db, plan_id), today)
    assert all(i.scheduled_date == start + timedelta(days=3) for i in groups["overdue"])
    summary = get_plan_summary(tmp_db, plan_id, today)
    assert summary["minutes_done"] == 135
    assert summary["minutes_total"] == 630
    assert list_plans(tmp_db, 1)[0]["progress"] == summary["completion"]
