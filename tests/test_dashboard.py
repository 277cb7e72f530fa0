# tests/test_dashboard.py
from datetime import date, timedelta

from cfa_tutor.db import init_db
from cfa_tutor.seed import seed_all
from cfa_tutor.config import PlannerConfig
from cfa_tutor.progress import set_progress
from cfa_tutor.models import StudyPlanGenerationOptions
from cfa_tutor.planner import generate_plan_for_user
from cfa_tutor.plans import save_plan, get_plan_items, set_item_completed
from cfa_tutor.dashboard import (
    get_proficiency_label, get_proficiency_color, get_study_stats, get_plan_summary,
)


def test_proficiency_label():
    assert get_proficiency_label(85) == "STRONG"
    assert get_proficiency_label(55) == "DEVELOPING"
    assert get_proficiency_label(20) == "WEAK"
    assert get_proficiency_label(0, attempted=0) == "NOT STARTED"


def test_proficiency_label_follows_config():
    config = PlannerConfig(low_threshold=60, high_threshold=90)
    assert get_proficiency_label(85, config=config) == "DEVELOPING"
    assert get_proficiency_label(55, config=config) == "WEAK"


def test_proficiency_color():
    assert get_proficiency_color(85) == "green"
    assert get_proficiency_color(55) == "yellow"
    assert get_proficiency_color(20) == "red"
    assert get_proficiency_color(0, attempted=0) == "dim"


def test_study_stats_empty(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    stats = get_study_stats(tmp_db, 1)
    assert stats["topics_practiced"] == 0
    assert stats["topics_total"] == 10
    assert stats["accuracy"] == 0.0
    assert stats["weakest_topic"] is None


def test_study_stats_with_progress(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    set_progress(tmp_db, 1, 3, attempted=10, correct=8, time_spent=3600)
    set_progress(tmp_db, 1, 7, attempted=10, correct=4, time_spent=1800)
    stats = get_study_stats(tmp_db, 1)
    assert stats["topics_practiced"] == 2
    assert stats["questions_attempted"] == 20
    assert stats["accuracy"] == 60.0
    assert stats["hours_spent"] == 1.5
    assert stats["weakest_topic"] == "Fixed Income"


def test_plan_summary(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    start = date(2026, 3, 2)
    options = StudyPlanGenerationOptions(
        start_date=start, end_date=start + timedelta(days=3), daily_study_time=60,
        included_topics=[1, 2],
    )
    plan = generate_plan_for_user(tmp_db, 1, options)
    plan_id = save_plan(tmp_db, 1, plan)
    first = get_plan_items(tmp_db, plan_id)[0]
    set_item_completed(tmp_db, first.id)

    summary = get_plan_summary(tmp_db, plan_id, today=start + timedelta(days=1))
    assert summary["sessions"] == len(plan.sessions)
    assert summary["minutes_total"] == 240
    assert summary["minutes_done"] == first.duration_minutes
    assert summary["overdue"] + summary["today"] + summary["upcoming"] == len(plan.sessions) - 1
    assert summary["completion"] > 0
