from typing import List, Sequence

from studynow.ranker import RankedTopic
from studynow.schemas import DueReason, ScheduleEntry, TopicStatus

DEFAULT_TARGET_SLOT_COUNT = 4
DEFAULT_MIN_SLOT_MINUTES = 10
DEFAULT_EXAM_URGENT_THRESHOLD = 0.66


def due_reason(item: RankedTopic, exam_urgent_threshold: float = DEFAULT_EXAM_URGENT_THRESHOLD) -> DueReason:
    """Tag why a ranked topic made it into the schedule"""
    if item.due.is_due and item.due.overdue_days > 0:
        return DueReason.OVERDUE
    if item.urgency >= exam_urgent_threshold:
        return DueReason.EXAM_URGENT
    if item.topic.status == TopicStatus.NEW:
        return DueReason.NEW_TOPIC
    return DueReason.SCHEDULED_REVIEW


def slot_minutes(
    candidate_count: int,
    daily_goal_minutes: int,
    target_slot_count: int = DEFAULT_TARGET_SLOT_COUNT,
    min_slot_minutes: int = DEFAULT_MIN_SLOT_MINUTES
) -> int:
    """Minutes per topic: the budget split across up to target_slot_count topics"""
    slots = max(1, min(candidate_count, target_slot_count))
    return max(min_slot_minutes, daily_goal_minutes // slots)


def allocate(
    ranked: Sequence[RankedTopic],
    daily_goal_minutes: int,
    target_slot_count: int = DEFAULT_TARGET_SLOT_COUNT,
    min_slot_minutes: int = DEFAULT_MIN_SLOT_MINUTES,
    exam_urgent_threshold: float = DEFAULT_EXAM_URGENT_THRESHOLD
) -> List[ScheduleEntry]:
    """
    Time-box ranked topics into the daily budget.

    Topics are taken in rank order, each receiving one slot, until the list
    runs out or less than min_slot_minutes of budget is left. The total never
    exceeds daily_goal_minutes.
    """
    if not ranked or daily_goal_minutes <= 0:
        return []

    slot = slot_minutes(len(ranked), daily_goal_minutes, target_slot_count, min_slot_minutes)
    remaining = daily_goal_minutes
    entries: List[ScheduleEntry] = []

    for item in ranked:
        if remaining < min_slot_minutes:
            break
        minutes = min(slot, remaining)
        if minutes <= 0:
            break
        entries.append(ScheduleEntry(
            topic_id=item.topic.id,
            subject_id=item.subject.id,
            allocated_minutes=minutes,
            priority_score=round(item.score, 4),
            due_reason=due_reason(item, exam_urgent_threshold),
        ))
        remaining -= minutes

    return entries
