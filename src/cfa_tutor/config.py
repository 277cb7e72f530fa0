"""Tunable planner parameters and persisted user settings."""
import json
from dataclasses import dataclass, field, fields
from typing import Optional

from cfa_tutor.db import get_connection

MAX_DAILY_MINUTES = 24 * 60


def _default_weights() -> dict[int, int]:
    return {1: 1, 2: 2, 3: 3}


@dataclass
class PlannerConfig:
    """Defaults for proficiency thresholds, weighting and scheduling.

    Proficiency below ``low_threshold`` is priority 3, above
    ``high_threshold`` is priority 1, anything in between is priority 2.
    Each focus area requests ``priority_weights[priority] * minutes_per_weight``
    minutes of study.
    """
    low_threshold: float = 40.0
    high_threshold: float = 70.0
    priority_weights: dict[int, int] = field(default_factory=_default_weights)
    minutes_per_weight: int = 120
    default_daily_minutes: int = 60
    session_block_minutes: int = 30
    include_unattempted: bool = True
    unattempted_proficiency: float = 0.0
    unattempted_priority: int = 3
    max_focus_areas: Optional[int] = None
    fill_horizon: bool = False

    def __post_init__(self):
        if not 0 <= self.low_threshold <= self.high_threshold <= 100:
            raise ValueError("thresholds must satisfy 0 <= low <= high <= 100")
        if set(self.priority_weights) != {1, 2, 3}:
            raise ValueError("priority_weights must define priorities 1, 2 and 3")
        if any(w <= 0 for w in self.priority_weights.values()):
            raise ValueError("priority weights must be positive")
        if not self.priority_weights[1] <= self.priority_weights[2] <= self.priority_weights[3]:
            raise ValueError("priority weights must not decrease with priority")
        if self.minutes_per_weight <= 0:
            raise ValueError("minutes_per_weight must be positive")
        if not 0 < self.default_daily_minutes <= MAX_DAILY_MINUTES:
            raise ValueError("default_daily_minutes must be between 1 and 1440")
        if self.session_block_minutes <= 0:
            raise ValueError("session_block_minutes must be positive")
        if not 0 <= self.unattempted_proficiency <= 100:
            raise ValueError("unattempted_proficiency must be within 0-100")
        if self.unattempted_priority not in (1, 2, 3):
            raise ValueError("unattempted_priority must be 1, 2 or 3")
        if self.max_focus_areas is not None and self.max_focus_areas <= 0:
            raise ValueError("max_focus_areas must be positive")


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def _parse(name: str, raw: str):
    if name == "priority_weights":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("priority_weights must be a JSON object mapping priority to weight")
        try:
            return {int(k): int(v) for k, v in data.items()}
        except TypeError:
            raise ValueError("priority weights must be integers") from None
    if name in ("include_unattempted", "fill_horizon"):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if name == "max_focus_areas":
        return None if raw.strip().lower() in ("", "none") else int(raw)
    if name in ("low_threshold", "high_threshold", "unattempted_proficiency"):
        return float(raw)
    return int(raw)


def _format(value) -> str:
    if isinstance(value, dict):
        return json.dumps({str(k): v for k, v in value.items()})
    if isinstance(value, bool):
        return "true" if value else "false"
    return "" if value is None else str(value)


def config_keys() -> list[str]:
    return [f.name for f in fields(PlannerConfig)]


def load_config(db_path: str) -> PlannerConfig:
    """Build a PlannerConfig from defaults overlaid with stored settings."""
    overrides = {}
    for name in config_keys():
        raw = get_setting(db_path, f"planner.{name}")
        if raw is not None:
            overrides[name] = _parse(name, raw)
    return PlannerConfig(**overrides)


def save_config_value(db_path: str, name: str, raw: str) -> PlannerConfig:
    """Validate and persist a single planner setting. Returns the new config."""
    if name not in config_keys():
        raise KeyError(f"Unknown planner setting: {name}")
    value = _parse(name, raw)
    current = load_config(db_path)
    setattr(current, name, value)
    # Re-run validation on the combined settings before storing.
    PlannerConfig(**{f: getattr(current, f) for f in config_keys()})
    set_setting(db_path, f"planner.{name}", _format(value))
    return current
