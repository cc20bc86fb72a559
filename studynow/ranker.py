"""
Priority ranking for the "study now" list.

A topic's score is the sum of four terms:

- due term: 1 + log1p(overdue days) when the topic is due, else 0
- urgency term: twice the subject's exam urgency
- difficulty term: easy=1, medium=2, hard=3, reshaped by the weighting
  preference (hard-focus scales by 1.5, easy-focus inverts to 4 - weight)
- newness term: 0.5 for never-reviewed topics

Only topics that are due, exam-urgent or new are candidates; the rest are
left out of the ranking entirely.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, NamedTuple

from loguru import logger

from studynow.schemas import (
    Difficulty,
    Preferences,
    PriorityWeight,
    SubjectSnapshot,
    TopicSnapshot,
    TopicStatus,
)
from studynow.tracker import DueStatus, SpacedRepetitionTracker
from studynow.urgency import DEFAULT_URGENCY_HORIZON_DAYS, exam_urgency, subject_urgencies

URGENCY_WEIGHT = 2.0
NEWNESS_BOOST = 0.5
HARD_FOCUS_MULTIPLIER = 1.5

DIFFICULTY_WEIGHTS = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 2.0,
    Difficulty.HARD: 3.0,
}


@dataclass(frozen=True)
class IntegrityIssue:
    """A topic that points at a subject missing from the supplied set"""
    topic_id: int
    subject_id: int

    @property
    def message(self) -> str:
        return f"Topic {self.topic_id} references unknown subject {self.subject_id}"


@dataclass(frozen=True)
class RankedTopic:
    """Topic annotated with everything the allocator needs"""
    topic: TopicSnapshot
    subject: SubjectSnapshot
    score: float
    due: DueStatus
    urgency: float


class RankingResult(NamedTuple):
    ranked: List[RankedTopic]
    integrity_issues: List[IntegrityIssue]


def difficulty_term(difficulty: Difficulty, weight: PriorityWeight) -> float:
    base = DIFFICULTY_WEIGHTS[Difficulty(difficulty)]
    if weight == PriorityWeight.HARD_FOCUS:
        return base * HARD_FOCUS_MULTIPLIER
    if weight == PriorityWeight.EASY_FOCUS:
        return 4.0 - base
    return base


def _score_terms(topic: TopicSnapshot, due: DueStatus, urgency: float, prefs: Preferences) -> float:
    due_term = (1.0 + math.log1p(due.overdue_days)) if due.is_due else 0.0
    urgency_term = urgency * URGENCY_WEIGHT
    newness_term = NEWNESS_BOOST if topic.status == TopicStatus.NEW else 0.0
    return due_term + urgency_term + difficulty_term(topic.difficulty, prefs.topic_priority_weight) + newness_term


def score(
    topic: TopicSnapshot,
    subject: SubjectSnapshot,
    prefs: Preferences,
    now: datetime,
    horizon_days: float = DEFAULT_URGENCY_HORIZON_DAYS
) -> float:
    """Composite priority score of one topic"""
    due = SpacedRepetitionTracker.due_status(topic, now)
    urgency = exam_urgency(subject, now, horizon_days)
    return _score_terms(topic, due, urgency, prefs)


def _sort_key(item: RankedTopic):
    exam_date = item.subject.exam_date
    # Higher score first, then the nearer exam (no exam last), then topic id
    return (-item.score, exam_date is None, exam_date or datetime.max, item.topic.id)


def rank_topics(
    subjects: Iterable[SubjectSnapshot],
    topics: Iterable[TopicSnapshot],
    prefs: Preferences,
    now: datetime,
    horizon_days: float = DEFAULT_URGENCY_HORIZON_DAYS
) -> RankingResult:
    """
    Order candidate topics by priority.

    Args:
        subjects: The user's subjects
        topics: The user's topics; each should reference one of subjects
        prefs: Preferences supplying the difficulty weighting
        now: Reference instant
        horizon_days: Exam urgency horizon

    Returns:
        RankingResult with the ranked candidates and any topics that were
        excluded because their subject is unknown
    """
    subjects_by_id: Dict[int, SubjectSnapshot] = {subject.id: subject for subject in subjects}
    urgencies = subject_urgencies(subjects_by_id.values(), now, horizon_days)

    ranked: List[RankedTopic] = []
    issues: List[IntegrityIssue] = []
    seen_topic_ids = set()

    for topic in topics:
        if topic.id in seen_topic_ids:
            continue

        subject = subjects_by_id.get(topic.subject_id)
        if subject is None:
            issue = IntegrityIssue(topic_id=topic.id, subject_id=topic.subject_id)
            logger.warning(issue.message)
            issues.append(issue)
            continue
        seen_topic_ids.add(topic.id)

        due = SpacedRepetitionTracker.due_status(topic, now)
        urgency = urgencies[subject.id]
        if not (due.is_due or urgency > 0 or topic.status == TopicStatus.NEW):
            continue

        ranked.append(RankedTopic(
            topic=topic,
            subject=subject,
            score=_score_terms(topic, due, urgency, prefs),
            due=due,
            urgency=urgency,
        ))

    ranked.sort(key=_sort_key)
    logger.debug(f"Ranked {len(ranked)} of {len(seen_topic_ids)} topics")
    return RankingResult(ranked, issues)
