import re
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from studynow.timeutils import to_naive_utc

DEFAULT_DAILY_GOAL_MINUTES = 60
DEFAULT_REMINDER_TIME = "09:00"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TopicStatus(str, Enum):
    """Topic lifecycle, only ever moves forward"""
    NEW = "new"
    LEARNING = "learning"
    REVIEWING = "reviewing"
    MASTERED = "mastered"

    @property
    def rank(self) -> int:
        return list(TopicStatus).index(self)


class PriorityWeight(str, Enum):
    BALANCED = "balanced"
    HARD_FOCUS = "hard-focus"
    EASY_FOCUS = "easy-focus"


class ReviewFrequency(str, Enum):
    STANDARD = "standard"
    FREQUENT = "frequent"
    INTENSIVE = "intensive"


class DueReason(str, Enum):
    """Why a topic was selected into today's schedule"""
    OVERDUE = "overdue"
    EXAM_URGENT = "exam-urgent"
    NEW_TOPIC = "new-topic"
    SCHEDULED_REVIEW = "scheduled-review"


# Labels used by the settings screen of the web client
_WEIGHT_LABELS = {
    "focus on hard topics": PriorityWeight.HARD_FOCUS,
    "focus on easy topics": PriorityWeight.EASY_FOCUS,
    "hard_focus": PriorityWeight.HARD_FOCUS,
    "easy_focus": PriorityWeight.EASY_FOCUS,
}

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_GOAL_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*\+?\s*(minutes?|mins?|m|hours?|hrs?|h)?$")


def _parse_enum(enum_cls, value, default, aliases=None):
    """Lenient enum lookup: case-insensitive values plus known aliases, default otherwise"""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return default
    key = value.strip().lower()
    if aliases and key in aliases:
        return aliases[key]
    try:
        return enum_cls(key)
    except ValueError:
        return default


def parse_goal_minutes(value, default: Optional[int] = DEFAULT_DAILY_GOAL_MINUTES) -> Optional[int]:
    """
    Parse a daily study goal into whole minutes.

    Accepts integers and labels such as "30 minutes", "2 hours" or "4+ hours".
    Values <= 0 clamp to 0; anything unparseable falls back to the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return max(0, int(value))
    if not isinstance(value, str):
        return default
    match = _GOAL_PATTERN.match(value.strip().lower())
    if not match:
        if value.strip().lstrip("-").isdigit():
            return max(0, int(value.strip()))
        return default
    amount = float(match.group(1))
    unit = match.group(2) or "minutes"
    if unit.startswith("h"):
        amount *= 60
    return max(0, int(amount))


class UserCreate(BaseModel):
    """Schema for creating a user"""
    name: str
    email: Optional[str] = None


class SubjectCreate(BaseModel):
    """Schema for creating a subject"""
    name: str = Field(min_length=1)
    exam_date: Optional[datetime] = None

    @field_validator("exam_date")
    @classmethod
    def normalize_exam_date(cls, value):
        return to_naive_utc(value)


class SubjectUpdate(BaseModel):
    """Schema for partial subject updates; clear_exam_date removes the exam"""
    name: Optional[str] = Field(default=None, min_length=1)
    exam_date: Optional[datetime] = None
    clear_exam_date: bool = False

    @field_validator("exam_date")
    @classmethod
    def normalize_exam_date(cls, value):
        return to_naive_utc(value)


class TopicCreate(BaseModel):
    """Schema for creating a topic inside a subject"""
    subject_id: int
    name: str = Field(min_length=1)
    difficulty: Difficulty = Difficulty.MEDIUM


class TopicUpdate(BaseModel):
    """Editable topic fields; review state is changed only by reviewing"""
    subject_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1)
    difficulty: Optional[Difficulty] = None


class Preferences(BaseModel):
    """Study preferences with documented defaults for missing or malformed fields"""
    model_config = ConfigDict(from_attributes=True)

    daily_study_goal_minutes: int = DEFAULT_DAILY_GOAL_MINUTES
    topic_priority_weight: PriorityWeight = PriorityWeight.BALANCED
    review_frequency: ReviewFrequency = ReviewFrequency.STANDARD
    reminder_time: str = DEFAULT_REMINDER_TIME

    @field_validator("daily_study_goal_minutes", mode="before")
    @classmethod
    def parse_goal(cls, value):
        return parse_goal_minutes(value)

    @field_validator("topic_priority_weight", mode="before")
    @classmethod
    def parse_weight(cls, value):
        return _parse_enum(PriorityWeight, value, PriorityWeight.BALANCED, _WEIGHT_LABELS)

    @field_validator("review_frequency", mode="before")
    @classmethod
    def parse_frequency(cls, value):
        return _parse_enum(ReviewFrequency, value, ReviewFrequency.STANDARD)

    @field_validator("reminder_time", mode="before")
    @classmethod
    def parse_reminder_time(cls, value):
        if isinstance(value, str) and _TIME_PATTERN.match(value.strip()):
            return value.strip()
        return DEFAULT_REMINDER_TIME


class PreferencesUpdate(BaseModel):
    """
    Partial preference update; only fields that were given are written.

    Unrecognised values are dropped, so the stored value stays as it was.
    """
    daily_study_goal_minutes: Optional[int] = None
    topic_priority_weight: Optional[PriorityWeight] = None
    review_frequency: Optional[ReviewFrequency] = None
    reminder_time: Optional[str] = None

    @field_validator("daily_study_goal_minutes", mode="before")
    @classmethod
    def parse_goal(cls, value):
        return parse_goal_minutes(value, default=None)

    @field_validator("topic_priority_weight", mode="before")
    @classmethod
    def parse_weight(cls, value):
        return _parse_enum(PriorityWeight, value, None, _WEIGHT_LABELS)

    @field_validator("review_frequency", mode="before")
    @classmethod
    def parse_frequency(cls, value):
        return _parse_enum(ReviewFrequency, value, None)

    @field_validator("reminder_time", mode="before")
    @classmethod
    def parse_reminder_time(cls, value):
        if isinstance(value, str) and _TIME_PATTERN.match(value.strip()):
            return value.strip()
        return None


class SubjectSnapshot(BaseModel):
    """Read-only view of a subject handed to the schedule engine"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str
    exam_date: Optional[datetime] = None

    @field_validator("exam_date")
    @classmethod
    def normalize_exam_date(cls, value):
        return to_naive_utc(value)


class TopicSnapshot(BaseModel):
    """Read-only view of a topic handed to the schedule engine"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    subject_id: int
    name: str
    difficulty: Difficulty = Difficulty.MEDIUM
    review_count: int = 0
    status: TopicStatus = TopicStatus.NEW
    last_reviewed_at: Optional[datetime] = None
    next_due_at: datetime
    user_id: Optional[int] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, value):
        return _parse_enum(Difficulty, value, Difficulty.MEDIUM)

    @field_validator("review_count", mode="before")
    @classmethod
    def clamp_review_count(cls, value):
        # Negative counts are clamped, never rejected
        if value is None:
            return 0
        return max(0, int(value))

    @field_validator("last_reviewed_at", "next_due_at")
    @classmethod
    def normalize_instants(cls, value):
        return to_naive_utc(value)


class ScheduleEntry(BaseModel):
    """One time-boxed topic in a generated schedule (never persisted)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    topic_id: int
    subject_id: int
    allocated_minutes: int = Field(gt=0)
    priority_score: float
    due_reason: DueReason
