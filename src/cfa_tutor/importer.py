"""Import practice history exported from other tools."""
import csv
import json
import logging
from pathlib import Path

from cfa_tutor.models import Topic
from cfa_tutor.progress import find_topic, get_topics, set_progress

logger = logging.getLogger(__name__)

# Common abbreviations used by prep providers, mapped to topic ids
TOPIC_KEYWORDS = {
    1: ["ethic", "professional standards", "gips"],
    2: ["quant", "statistic", "tvm", "time value"],
    3: ["econ"],
    4: ["financial statement", "fsa", "fra", "financial reporting", "accounting"],
    5: ["corporate", "corp fin", "issuer"],
    6: ["equity", "equities", "stock"],
    7: ["fixed income", "bond", "fi "],
    8: ["derivative", "option", "futures", "swap"],
    9: ["alternative", "alts", "real estate", "hedge fund", "private", "private equity"],
    10: ["portfolio", "pm ", "risk management"],
}


def read_records(file_path: str) -> list[dict]:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        with path.open(newline="") as f:
            return list(csv.DictReader(f))
    elif suffix == ".json":
        data = json.loads(path.read_text())
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text())
    else:
        raise ValueError(f"Unsupported progress file type: {suffix or path.name}")
    if isinstance(data, dict):
        data = data.get("progress", [])
    if not isinstance(data, list):
        raise ValueError("Progress file must contain a list of records")
    return data


def categorize_topic(label: str, topics: list[Topic]) -> int | None:
    """Resolve a topic label by id, exact name, then keyword. Returns topic_id or None."""
    topic = find_topic(topics, label)
    if topic:
        return topic.id
    text = f" {str(label).lower()} "
    scores = {
        topic_id: sum(1 for kw in keywords if kw in text)
        for topic_id, keywords in TOPIC_KEYWORDS.items()
        if any(t.id == topic_id for t in topics)
    }
    if not scores:
        return None
    best = max(scores, key=scores.get)
    return best if scores[best] > 0 else None


def import_progress(db_path: str, user_id: int, file_path: str) -> dict:
    """Load per-topic totals from a CSV, JSON or YAML file into user progress.

    Each record needs ``topic``, ``attempted`` and ``correct``; ``time_spent``
    (seconds) is optional. Rows that cannot be matched or parsed are skipped.
    """
    topics = get_topics(db_path)
    imported, skipped = 0, []
    for record in read_records(file_path):
        if not isinstance(record, dict):
            logger.warning("Skipping malformed record %r", record)
            skipped.append(str(record))
            continue
        label = record.get("topic", "")
        topic_id = categorize_topic(label, topics)
        if topic_id is None:
            skipped.append(str(label))
            continue
        try:
            set_progress(
                db_path, user_id, topic_id,
                attempted=int(record.get("attempted", 0)),
                correct=int(record.get("correct", 0)),
                time_spent=int(record.get("time_spent") or 0),
            )
        except (TypeError, ValueError) as e:
            logger.warning("Skipping %r: %s", label, e)
            skipped.append(str(label))
            continue
        imported += 1
    logger.info("Imported %d progress records from %s (%d skipped)", imported, file_path, len(skipped))
    return {"filename": Path(file_path).name, "imported": imported, "skipped": skipped}
