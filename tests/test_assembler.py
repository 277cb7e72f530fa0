from datetime import date, timedelta

from cfa_tutor.allocator import Allocation
from cfa_tutor.assembler import assemble_sessions, daily_quotas, session_title
from cfa_tutor.config import PlannerConfig
from cfa_tutor.models import FocusAreaWithDetails, StudySession

D1 = date(2026, 3, 2)
D2 = date(2026, 3, 3)


def details():
    return [
        FocusAreaWithDetails(topic_id=1, priority=3, topic_name="Ethics", proficiency=20.0),
        FocusAreaWithDetails(topic_id=2, priority=1, topic_name="Economics", proficiency=90.0),
    ]


def test_daily_quotas_spread_remainder_first():
    assert daily_quotas(100, 3) == [34, 33, 33]
    assert daily_quotas(120, 2) == [60, 60]
    assert daily_quotas(2, 4) == [1, 1, 0, 0]


def test_session_title():
    assert session_title(details()[0], 1) == "Ethics: intensive review"
    assert session_title(details()[1], 2) == "Economics: maintenance review"
    assert session_title(None, 7) == "Topic 7"


def test_round_robin_merges_same_day_turns():
    allocation = Allocation(days=[D1, D2], daily_minutes=60, budgets={1: 90, 2: 30})
    sessions = assemble_sessions(allocation, details())
    assert sessions == [
        StudySession(D1, 1, 30, "Ethics: intensive review"),
        StudySession(D1, 2, 30, "Economics: maintenance review"),
        StudySession(D2, 1, 60, "Ethics: intensive review"),
    ]


def test_rotation_carries_across_days():
    allocation = Allocation(days=[D1, D2], daily_minutes=30, budgets={1: 30, 2: 30})
    sessions = assemble_sessions(allocation, details())
    assert [(s.day, s.topic_id) for s in sessions] == [(D1, 1), (D2, 2)]


def test_budgets_exhausted_and_ceiling_respected():
    day_list = [D1 + timedelta(days=i) for i in range(7)]
    allocation = Allocation(days=day_list, daily_minutes=45, budgets={1: 170, 2: 75, 3: 50})
    sessions = assemble_sessions(allocation, details(), PlannerConfig(session_block_minutes=25))
    per_topic, per_day = {}, {}
    for s in sessions:
        per_topic[s.topic_id] = per_topic.get(s.topic_id, 0) + s.duration_minutes
        per_day[s.day] = per_day.get(s.day, 0) + s.duration_minutes
    assert per_topic == {1: 170, 2: 75, 3: 50}
    assert max(per_day.values()) <= 45
    assert sorted(per_day) == list(per_day)


def test_one_session_per_topic_per_day():
    allocation = Allocation(days=[D1], daily_minutes=120, budgets={1: 120})
    sessions = assemble_sessions(allocation, details())
    assert sessions == [StudySession(D1, 1, 120, "Ethics: intensive review")]


def test_idle_days_when_budget_is_small():
    allocation = Allocation(days=[D1, D2], daily_minutes=60, budgets={1: 1})
    sessions = assemble_sessions(allocation, details())
    assert sessions == [StudySession(D1, 1, 1, "Ethics: intensive review")]
