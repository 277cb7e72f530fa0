"""Persistence and completion tracking for generated study plans."""
import json
import logging
from dataclasses import asdict
from datetime import date, datetime

from cfa_tutor.db import get_connection
from cfa_tutor.errors import PlanTruncatedWarning
from cfa_tutor.models import FocusAreaWithDetails, StudyPlan, StudyPlanItem, StudySession

logger = logging.getLogger(__name__)


def _plan_values(plan: StudyPlan) -> tuple:
    warning = plan.warnings[0] if plan.warnings else None
    return (
        plan.name,
        plan.start_date.isoformat(),
        plan.end_date.isoformat(),
        plan.daily_study_time,
        plan.target_exam_date.isoformat() if plan.target_exam_date else None,
        json.dumps([asdict(a) for a in plan.focus_areas]),
        json.dumps(plan.included_topics),
        json.dumps(plan.excluded_topics),
        warning.requested_minutes if warning else None,
        warning.available_minutes if warning else None,
    )


def _insert_items(conn, plan_id: int, sessions: list[StudySession]) -> None:
    conn.executemany(
        """INSERT INTO study_plan_items
        (plan_id, position, topic_id, scheduled_date, duration_minutes, title)
        VALUES (?, ?, ?, ?, ?, ?)""",
        [
            (plan_id, i, s.topic_id, s.day.isoformat(), s.duration_minutes, s.title)
            for i, s in enumerate(sessions)
        ],
    )


def save_plan(db_path: str, user_id: int, plan: StudyPlan) -> int:
    """Store a plan and its sessions in one transaction. Sets and returns plan.id."""
    conn = get_connection(db_path)
    with conn:
        cursor = conn.execute(
            """INSERT INTO study_plans
            (name, start_date, end_date, daily_study_time, target_exam_date, focus_areas,
             included_topics, excluded_topics, requested_minutes, available_minutes,
             user_id, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            _plan_values(plan) + (user_id, datetime.now().isoformat()),
        )
        plan_id = cursor.lastrowid
        _insert_items(conn, plan_id, plan.sessions)
    conn.close()
    plan.id = plan_id
    logger.info("Saved study plan %d (%d sessions) for user %d", plan_id, len(plan.sessions), user_id)
    return plan_id


def replace_plan_sessions(db_path: str, plan_id: int, plan: StudyPlan) -> None:
    """Swap a stored plan for a regenerated one, keeping its id.

    Old items and their completion state are discarded; the update is a
    single transaction so readers see either the old or the new plan.
    """
    conn = get_connection(db_path)
    try:
        with conn:
            cursor = conn.execute(
                """UPDATE study_plans SET name=?, start_date=?, end_date=?, daily_study_time=?,
                target_exam_date=?, focus_areas=?, included_topics=?, excluded_topics=?,
                requested_minutes=?, available_minutes=?
                WHERE id=?""",
                _plan_values(plan) + (plan_id,),
            )
            if cursor.rowcount == 0:
                raise KeyError(f"Study plan {plan_id} not found")
            conn.execute("DELETE FROM study_plan_items WHERE plan_id = ?", (plan_id,))
            _insert_items(conn, plan_id, plan.sessions)
    finally:
        conn.close()
    plan.id = plan_id
    logger.info("Regenerated study plan %d (%d sessions)", plan_id, len(plan.sessions))


def _row_to_item(row) -> StudyPlanItem:
    return StudyPlanItem(
        id=row["id"],
        plan_id=row["plan_id"],
        position=row["position"],
        topic_id=row["topic_id"],
        scheduled_date=date.fromisoformat(row["scheduled_date"]),
        duration_minutes=row["duration_minutes"],
        title=row["title"] or "",
        completed=bool(row["completed"]),
        status=row["status"],
    )


def get_plan_items(db_path: str, plan_id: int) -> list[StudyPlanItem]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM study_plan_items WHERE plan_id = ? ORDER BY position", (plan_id,)
    ).fetchall()
    conn.close()
    return [_row_to_item(r) for r in rows]


def get_plan(db_path: str, plan_id: int) -> StudyPlan:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM study_plans WHERE id = ?", (plan_id,)).fetchone()
    conn.close()
    if row is None:
        raise KeyError(f"Study plan {plan_id} not found")
    warnings = []
    if row["requested_minutes"] is not None:
        warnings.append(PlanTruncatedWarning(row["requested_minutes"], row["available_minutes"]))
    return StudyPlan(
        id=row["id"],
        name=row["name"],
        start_date=date.fromisoformat(row["start_date"]),
        end_date=date.fromisoformat(row["end_date"]),
        daily_study_time=row["daily_study_time"],
        target_exam_date=date.fromisoformat(row["target_exam_date"]) if row["target_exam_date"] else None,
        focus_areas=[FocusAreaWithDetails(**a) for a in json.loads(row["focus_areas"] or "[]")],
        included_topics=json.loads(row["included_topics"] or "[]"),
        excluded_topics=json.loads(row["excluded_topics"] or "[]"),
        sessions=[
            StudySession(i.scheduled_date, i.topic_id, i.duration_minutes, i.title)
            for i in get_plan_items(db_path, plan_id)
        ],
        warnings=warnings,
    )


def get_plan_owner(db_path: str, plan_id: int) -> int:
    conn = get_connection(db_path)
    row = conn.execute("SELECT user_id FROM study_plans WHERE id = ?", (plan_id,)).fetchone()
    conn.close()
    if row is None:
        raise KeyError(f"Study plan {plan_id} not found")
    return row["user_id"]


def completion_percentage(items: list[StudyPlanItem]) -> int:
    if not items:
        return 0
    return round(sum(1 for i in items if i.completed) / len(items) * 100)


def list_plans(db_path: str, user_id: int) -> list[dict]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT p.id, p.name, p.start_date, p.end_date, p.focus_areas,
            COUNT(i.id) as total, COALESCE(SUM(i.completed), 0) as done
        FROM study_plans p
        LEFT JOIN study_plan_items i ON i.plan_id = p.id
        WHERE p.user_id = ?
        GROUP BY p.id
        ORDER BY p.id""",
        (user_id,),
    ).fetchall()
    conn.close()
    return [
        {
            "id": r["id"],
            "name": r["name"],
            "start_date": r["start_date"],
            "end_date": r["end_date"],
            "focus_areas": [a["topic_name"] for a in json.loads(r["focus_areas"] or "[]")],
            "sessions": r["total"],
            "progress": round(r["done"] / r["total"] * 100) if r["total"] else 0,
        }
        for r in rows
    ]


def set_item_completed(db_path: str, item_id: int, completed: bool = True) -> None:
    conn = get_connection(db_path)
    updated = conn.execute(
        "UPDATE study_plan_items SET completed = ?, status = ? WHERE id = ?",
        (int(completed), "completed" if completed else "pending", item_id),
    ).rowcount
    conn.commit()
    conn.close()
    if updated == 0:
        raise KeyError(f"Study plan item {item_id} not found")


def group_items(items: list[StudyPlanItem], today: date | None = None) -> dict[str, list[StudyPlanItem]]:
    """Split items into overdue, today, upcoming (all pending) and completed."""
    today = today or date.today()
    groups = {"overdue": [], "today": [], "upcoming": [], "completed": []}
    for item in items:
        if item.completed:
            groups["completed"].append(item)
        elif item.scheduled_date < today:
            groups["overdue"].append(item)
        elif item.scheduled_date == today:
            groups["today"].append(item)
        else:
            groups["upcoming"].append(item)
    return groups


def delete_plan(db_path: str, plan_id: int) -> None:
    conn = get_connection(db_path)
    with conn:
        conn.execute("DELETE FROM study_plan_items WHERE plan_id = ?", (plan_id,))
        deleted = conn.execute("DELETE FROM study_plans WHERE id = ?", (plan_id,)).rowcount
    conn.close()
    if deleted == 0:
        raise KeyError(f"Study plan {plan_id} not found")
