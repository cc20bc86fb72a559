from datetime import datetime, timedelta
from typing import NamedTuple

from studynow.intervals import IntervalModel
from studynow.schemas import ReviewFrequency, TopicSnapshot, TopicStatus
from studynow.timeutils import to_naive_utc

# Review counts at which a topic enters each status
LEARNING_THRESHOLD = 1
REVIEWING_THRESHOLD = 3
MASTERED_THRESHOLD = 6


class DueStatus(NamedTuple):
    is_due: bool
    overdue_days: int


def status_for_count(review_count: int) -> TopicStatus:
    """Lifecycle status implied by a review count"""
    if review_count >= MASTERED_THRESHOLD:
        return TopicStatus.MASTERED
    if review_count >= REVIEWING_THRESHOLD:
        return TopicStatus.REVIEWING
    if review_count >= LEARNING_THRESHOLD:
        return TopicStatus.LEARNING
    return TopicStatus.NEW


class SpacedRepetitionTracker:
    """Applies the interval model to a topic's review history"""

    @staticmethod
    def advance(topic: TopicSnapshot, frequency: ReviewFrequency, now: datetime) -> TopicSnapshot:
        """
        Record one completed review and reschedule the topic.

        Args:
            topic: Topic as it was before the review
            frequency: User's review frequency preference
            now: Review instant

        Returns:
            New snapshot with review count, status, last review and next due
            date updated; the input snapshot is not modified
        """
        now = to_naive_utc(now)
        review_count = topic.review_count + 1
        interval = IntervalModel.effective_interval(review_count, topic.difficulty, frequency)

        status = status_for_count(review_count)
        if status.rank < topic.status.rank:
            status = topic.status

        return topic.model_copy(update={
            "review_count": review_count,
            "status": status,
            "last_reviewed_at": now,
            "next_due_at": now + timedelta(days=interval),
        })

    @staticmethod
    def due_status(topic: TopicSnapshot, now: datetime) -> DueStatus:
        """Check whether a topic is due and by how many whole days it is overdue"""
        now = to_naive_utc(now)
        is_due = topic.last_reviewed_at is None or now >= topic.next_due_at
        overdue_days = max(0, (now - topic.next_due_at).days)
        return DueStatus(is_due, overdue_days)


advance = SpacedRepetitionTracker.advance
due_status = SpacedRepetitionTracker.due_status
