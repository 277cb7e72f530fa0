"""Topic catalog and per-topic progress lookups."""
from datetime import datetime
from cfa_tutor.db import get_connection
from cfa_tutor.models import Topic, ProgressRecord


def get_topics(db_path: str) -> list[Topic]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM topics ORDER BY id").fetchall()
    conn.close()
    return [
        Topic(id=r["id"], name=r["name"], description=r["description"] or "", icon=r["icon"] or "book")
        for r in rows
    ]


def find_topic(topics: list[Topic], key: str | int) -> Topic | None:
    """Look up a topic by id or by case-insensitive name."""
    if isinstance(key, int) or str(key).strip().isdigit():
        topic_id = int(key)
        return next((t for t in topics if t.id == topic_id), None)
    wanted = str(key).strip().lower()
    return next((t for t in topics if t.name.lower() == wanted), None)


def _row_to_record(row) -> ProgressRecord:
    return ProgressRecord(
        user_id=row["user_id"],
        topic_id=row["topic_id"],
        questions_attempted=row["questions_attempted"],
        questions_correct=row["questions_correct"],
        total_time_spent=row["total_time_spent"],
    )


def get_user_progress(db_path: str, user_id: int) -> list[ProgressRecord]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM user_progress WHERE user_id = ? ORDER BY topic_id", (user_id,)
    ).fetchall()
    conn.close()
    return [_row_to_record(r) for r in rows]


def get_progress_for_topic(db_path: str, user_id: int, topic_id: int) -> ProgressRecord | None:
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT * FROM user_progress WHERE user_id = ? AND topic_id = ?", (user_id, topic_id)
    ).fetchone()
    conn.close()
    return _row_to_record(row) if row else None


def set_progress(
    db_path: str,
    user_id: int,
    topic_id: int,
    attempted: int,
    correct: int,
    time_spent: int = 0,
) -> ProgressRecord:
    """Create or overwrite the progress row for a topic."""
    if attempted < 0 or correct < 0 or time_spent < 0:
        raise ValueError("progress counts must not be negative")
    if correct > attempted:
        raise ValueError("questions_correct cannot exceed questions_attempted")
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO user_progress
        (user_id, topic_id, questions_attempted, questions_correct, total_time_spent, last_updated)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id, topic_id) DO UPDATE SET
            questions_attempted=excluded.questions_attempted,
            questions_correct=excluded.questions_correct,
            total_time_spent=excluded.total_time_spent,
            last_updated=excluded.last_updated""",
        (user_id, topic_id, attempted, correct, time_spent, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
    return ProgressRecord(user_id, topic_id, attempted, correct, time_spent)


def record_answer(db_path: str, user_id: int, topic_id: int, is_correct: bool, time_spent: int = 0) -> ProgressRecord:
    """Add one answered question to the user's running totals for a topic."""
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO user_progress
        (user_id, topic_id, questions_attempted, questions_correct, total_time_spent, last_updated)
        VALUES (?, ?, 1, ?, ?, ?)
        ON CONFLICT(user_id, topic_id) DO UPDATE SET
            questions_attempted=questions_attempted + 1,
            questions_correct=questions_correct + excluded.questions_correct,
            total_time_spent=total_time_spent + excluded.total_time_spent,
            last_updated=excluded.last_updated""",
        (user_id, topic_id, int(is_correct), time_spent, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
    return get_progress_for_topic(db_path, user_id, topic_id)


def reset_progress(db_path: str, user_id: int) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM user_progress WHERE user_id = ?", (user_id,))
    conn.commit()
    conn.close()


def get_topic_scores(db_path: str, user_id: int) -> list[dict]:
    """Accuracy per catalog topic, including topics never practiced."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT t.id, t.name,
            COALESCE(p.questions_attempted, 0) as attempted,
            COALESCE(p.questions_correct, 0) as correct,
            COALESCE(p.total_time_spent, 0) as time_spent
        FROM topics t
        LEFT JOIN user_progress p ON p.topic_id = t.id AND p.user_id = ?
        ORDER BY t.id""",
        (user_id,),
    ).fetchall()
    conn.close()
    return [
        {
            "topic_id": r["id"],
            "name": r["name"],
            "attempted": r["attempted"],
            "correct": r["correct"],
            "time_spent": r["time_spent"],
            "accuracy": round(r["correct"] / r["attempted"] * 100, 1) if r["attempted"] else 0.0,
        }
        for r in rows
    ]
