"""Seed the database with the CFA Level I topic catalog."""
import json
from pathlib import Path
from cfa_tutor.db import get_connection

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the database has already been seeded with topics."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM topics").fetchone()[0]
    conn.close()
    return count > 0


def seed_topics(db_path: str) -> None:
    """Insert all exam topics from topics.json."""
    data = json.loads((CONTENT_DIR / "topics.json").read_text())
    conn = get_connection(db_path)
    for topic in data["topics"]:
        conn.execute(
            "INSERT OR IGNORE INTO topics (id, name, description, icon) VALUES (?, ?, ?, ?)",
            (topic["id"], topic["name"], topic["description"], topic.get("icon", "book")),
        )
    conn.commit()
    conn.close()


def seed_all(db_path: str) -> None:
    """Run all seed functions in order."""
    if is_seeded(db_path):
        return
    seed_topics(db_path)
