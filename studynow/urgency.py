from datetime import datetime
from typing import Dict, Iterable

from studynow.schemas import SubjectSnapshot
from studynow.timeutils import days_between

DEFAULT_URGENCY_HORIZON_DAYS = 30.0


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def exam_urgency(
    subject: SubjectSnapshot,
    now: datetime,
    horizon_days: float = DEFAULT_URGENCY_HORIZON_DAYS
) -> float:
    """
    Exam proximity in [0, 1].

    0 without an exam or when the exam is more than horizon_days away, rising
    linearly to 1 on exam day. A past exam counts as maximally urgent.
    """
    if subject.exam_date is None:
        return 0.0
    days_until_exam = days_between(now, subject.exam_date)
    if days_until_exam <= 0:
        return 1.0
    if horizon_days <= 0:
        return 0.0
    return clamp01(1.0 - days_until_exam / horizon_days)


def subject_urgencies(
    subjects: Iterable[SubjectSnapshot],
    now: datetime,
    horizon_days: float = DEFAULT_URGENCY_HORIZON_DAYS
) -> Dict[int, float]:
    """Urgency per subject id; every topic inherits its subject's value"""
    return {subject.id: exam_urgency(subject, now, horizon_days) for subject in subjects}
