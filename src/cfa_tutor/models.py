"""Data classes for the study planner domain model."""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass
class Topic:
    id: int
    name: str
    description: str = ""
    icon: str = "book"


@dataclass
class ProgressRecord:
    user_id: int
    topic_id: int
    questions_attempted: int = 0
    questions_correct: int = 0
    total_time_spent: int = 0  # seconds

    @property
    def accuracy(self) -> float:
        """Percentage of correct answers, 0.0 when nothing was attempted."""
        if self.questions_attempted <= 0:
            return 0.0
        return round(self.questions_correct / self.questions_attempted * 100, 1)


@dataclass
class WeakArea:
    topic_id: int
    proficiency: float  # 0-100
    priority: int  # 1-3 (low, medium, high)


@dataclass
class FocusAreaWithDetails:
    topic_id: int
    priority: int
    topic_name: str
    proficiency: float


@dataclass
class StudyPlanGenerationOptions:
    start_date: date
    end_date: date
    name: Optional[str] = None
    daily_study_time: Optional[int] = None  # minutes
    target_exam_date: Optional[date] = None
    included_topics: list[int] = field(default_factory=list)
    excluded_topics: list[int] = field(default_factory=list)
    focus_areas: list[WeakArea] = field(default_factory=list)
    generate_from_user_progress: bool = True


@dataclass(frozen=True)
class StudySession:
    day: date
    topic_id: int
    duration_minutes: int
    title: str = ""


@dataclass
class StudyPlan:
    name: str
    start_date: date
    end_date: date
    daily_study_time: int
    id: Optional[int] = None
    target_exam_date: Optional[date] = None
    focus_areas: list[FocusAreaWithDetails] = field(default_factory=list)
    included_topics: list[int] = field(default_factory=list)
    excluded_topics: list[int] = field(default_factory=list)
    sessions: list[StudySession] = field(default_factory=list)
    warnings: list = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return sum(s.duration_minutes for s in self.sessions)

    def minutes_by_topic(self) -> dict[int, int]:
        totals: dict[int, int] = {}
        for s in self.sessions:
            totals[s.topic_id] = totals.get(s.topic_id, 0) + s.duration_minutes
        return totals

    def minutes_by_day(self) -> dict[date, int]:
        totals: dict[date, int] = {}
        for s in self.sessions:
            totals[s.day] = totals.get(s.day, 0) + s.duration_minutes
        return totals


@dataclass
class StudyPlanItem:
    """A persisted study session with completion tracking."""
    id: int
    plan_id: int
    position: int
    topic_id: int
    scheduled_date: date
    duration_minutes: int
    title: str = ""
    completed: bool = False
    status: str = "pending"
