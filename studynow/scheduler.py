from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel

from studynow.allocator import (
    DEFAULT_EXAM_URGENT_THRESHOLD,
    DEFAULT_MIN_SLOT_MINUTES,
    DEFAULT_TARGET_SLOT_COUNT,
    allocate,
)
from studynow.config import Settings, settings
from studynow.exceptions import DataIntegrityError, TopicNotFoundError
from studynow.ranker import IntegrityIssue, rank_topics
from studynow.repository import StudyRepository
from studynow.schemas import Preferences, ScheduleEntry, SubjectSnapshot, TopicSnapshot
from studynow.timeutils import to_naive_utc
from studynow.tracker import SpacedRepetitionTracker
from studynow.urgency import DEFAULT_URGENCY_HORIZON_DAYS


class SchedulerConfig(BaseModel):
    """Tunable constants of the schedule engine"""
    target_slot_count: int = DEFAULT_TARGET_SLOT_COUNT
    min_slot_minutes: int = DEFAULT_MIN_SLOT_MINUTES
    urgency_horizon_days: float = DEFAULT_URGENCY_HORIZON_DAYS
    exam_urgent_threshold: float = DEFAULT_EXAM_URGENT_THRESHOLD
    default_daily_goal_minutes: int = 60

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "SchedulerConfig":
        return cls(
            target_slot_count=app_settings.target_slot_count,
            min_slot_minutes=app_settings.min_slot_minutes,
            urgency_horizon_days=app_settings.urgency_horizon_days,
            exam_urgent_threshold=app_settings.exam_urgent_threshold,
            default_daily_goal_minutes=app_settings.default_daily_goal_minutes,
        )


@dataclass
class ScheduleResult:
    """Generated schedule plus any topics left out for referencing unknown subjects"""
    entries: List[ScheduleEntry] = field(default_factory=list)
    integrity_issues: List[IntegrityIssue] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        return sum(entry.allocated_minutes for entry in self.entries)

    def to_json(self) -> List[Dict[str, Any]]:
        """Entries as camelCase JSON-ready dicts"""
        return [entry.model_dump(mode="json", by_alias=True) for entry in self.entries]

    def raise_for_integrity(self) -> None:
        if self.integrity_issues:
            raise DataIntegrityError(self.integrity_issues)


class StudyScheduler:
    """
    Deterministic daily schedule generation.

    Pure over its inputs: no clock reads, no I/O. Topics are annotated with
    dueness and exam urgency, ranked, then time-boxed to the daily goal.
    """

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or SchedulerConfig()

    def generate_schedule(
        self,
        subjects: Iterable[SubjectSnapshot],
        topics: Iterable[TopicSnapshot],
        preferences: Optional[Preferences],
        now: datetime
    ) -> ScheduleResult:
        """
        Build today's study schedule.

        Args:
            subjects: The user's subjects
            topics: The user's topics
            preferences: Study preferences; defaults apply when None
            now: Reference instant, injected by the caller

        Returns:
            ScheduleResult with ordered entries (possibly empty)
        """
        if preferences is None:
            preferences = Preferences(daily_study_goal_minutes=self.config.default_daily_goal_minutes)
        now = to_naive_utc(now)

        ranking = rank_topics(
            list(subjects),
            list(topics),
            preferences,
            now,
            horizon_days=self.config.urgency_horizon_days,
        )
        entries = allocate(
            ranking.ranked,
            preferences.daily_study_goal_minutes,
            target_slot_count=self.config.target_slot_count,
            min_slot_minutes=self.config.min_slot_minutes,
            exam_urgent_threshold=self.config.exam_urgent_threshold,
        )
        logger.debug(
            f"Allocated {len(entries)} of {len(ranking.ranked)} candidates "
            f"into {preferences.daily_study_goal_minutes} minutes"
        )
        return ScheduleResult(entries=entries, integrity_issues=ranking.integrity_issues)


def get_scheduler() -> StudyScheduler:
    """Factory function returning a scheduler tuned from application settings"""
    return StudyScheduler(SchedulerConfig.from_settings(settings))


def generate_schedule(
    subjects: Iterable[SubjectSnapshot],
    topics: Iterable[TopicSnapshot],
    preferences: Optional[Preferences],
    now: datetime,
    config: Optional[SchedulerConfig] = None
) -> ScheduleResult:
    """Generate a schedule with the given (or default) engine constants"""
    return StudyScheduler(config).generate_schedule(subjects, topics, preferences, now)


def get_study_schedule(
    repo: StudyRepository,
    user_id: int,
    now: datetime,
    config: Optional[SchedulerConfig] = None
) -> ScheduleResult:
    """Load a user's data from the repository and schedule it (settings tuning by default)"""
    scheduler = StudyScheduler(config) if config else get_scheduler()
    subjects = repo.get_subjects(user_id)
    topics = repo.get_topics(user_id)
    preferences = repo.get_preferences(user_id)

    result = scheduler.generate_schedule(subjects, topics, preferences, now)
    logger.info(
        f"Schedule for user {user_id}: {len(result.entries)} topics, "
        f"{result.total_minutes} minutes"
    )
    return result


def review_topic(repo: StudyRepository, user_id: int, topic_id: int, now: datetime) -> TopicSnapshot:
    """
    Mark a topic as reviewed at now and persist the rescheduled topic.

    Raises:
        TopicNotFoundError: topic_id is not one of the user's topics
    """
    topic = repo.get_topic(user_id, topic_id)
    if topic is None:
        raise TopicNotFoundError(topic_id, user_id)

    preferences = repo.get_preferences(user_id) or Preferences()
    updated = SpacedRepetitionTracker.advance(topic, preferences.review_frequency, now)
    if updated.user_id is None:
        updated = updated.model_copy(update={"user_id": user_id})
    repo.save_topic(updated)

    logger.info(
        f"Topic {topic_id} reviewed ({updated.review_count} reviews, {updated.status.value}), "
        f"next due {updated.next_due_at:%Y-%m-%d}"
    )
    return updated
