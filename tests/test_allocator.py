"""Tests for studynow.allocator."""
from datetime import timedelta

import pytest

from studynow.allocator import allocate, due_reason, slot_minutes
from studynow.ranker import RankedTopic
from studynow.schemas import DueReason
from studynow.tracker import DueStatus


@pytest.fixture
def make_ranked(make_topic, make_subject):
    def _make(count, score=5.0):
        subject = make_subject()
        return [
            RankedTopic(
                topic=make_topic(id=i + 1),
                subject=subject,
                score=score - i * 0.1,
                due=DueStatus(True, 0),
                urgency=0.0,
            )
            for i in range(count)
        ]
    return _make


def test_empty_ranking_gives_empty_schedule() -> None:
    assert allocate([], 60) == []


@pytest.mark.parametrize("goal", [0, -15, 5, 9])
def test_budget_below_minimum_slot_gives_empty_schedule(make_ranked, goal) -> None:
    assert allocate(make_ranked(3), goal) == []


def test_budget_split_evenly_between_few_topics(make_ranked) -> None:
    entries = allocate(make_ranked(2), 60)
    assert [e.allocated_minutes for e in entries] == [30, 30]
    assert [e.topic_id for e in entries] == [1, 2]


def test_at_most_target_slot_count_topics_per_day(make_ranked) -> None:
    entries = allocate(make_ranked(6), 60)
    assert [e.allocated_minutes for e in entries] == [15, 15, 15, 15]
    assert [e.topic_id for e in entries] == [1, 2, 3, 4]


def test_slots_never_smaller_than_minimum(make_ranked) -> None:
    entries = allocate(make_ranked(4), 25)
    assert [e.allocated_minutes for e in entries] == [10, 10]


def test_single_topic_gets_whole_budget(make_ranked) -> None:
    entries = allocate(make_ranked(1), 35)
    assert [e.allocated_minutes for e in entries] == [35]


def test_custom_slot_configuration(make_ranked) -> None:
    entries = allocate(make_ranked(5), 60, target_slot_count=2, min_slot_minutes=20)
    assert [e.allocated_minutes for e in entries] == [30, 30]


def test_slot_minutes() -> None:
    assert slot_minutes(2, 60) == 30
    assert slot_minutes(10, 60) == 15
    assert slot_minutes(3, 20) == 10
    assert slot_minutes(0, 60) == 60


def test_entries_keep_rank_order_and_score(make_ranked) -> None:
    entries = allocate(make_ranked(3), 90)
    assert [e.priority_score for e in entries] == [5.0, 4.9, 4.8]


@pytest.mark.parametrize("goal", range(0, 200, 7))
@pytest.mark.parametrize("count", range(0, 9))
def test_budget_bound_and_unique_topics(make_ranked, goal, count) -> None:
    entries = allocate(make_ranked(count), goal)
    assert sum(e.allocated_minutes for e in entries) <= max(goal, 0)
    assert len({e.topic_id for e in entries}) == len(entries)
    assert all(e.allocated_minutes >= 10 for e in entries)


class TestDueReason:
    def _ranked(self, make_topic, make_subject, now, due, urgency, **topic_kwargs):
        return RankedTopic(
            topic=make_topic(**topic_kwargs),
            subject=make_subject(),
            score=1.0,
            due=due,
            urgency=urgency,
        )

    def test_overdue_wins(self, make_topic, make_subject, now) -> None:
        item = self._ranked(make_topic, make_subject, now, DueStatus(True, 2), 0.9)
        assert due_reason(item) == DueReason.OVERDUE

    def test_exam_urgent_when_not_overdue(self, make_topic, make_subject, now) -> None:
        item = self._ranked(make_topic, make_subject, now, DueStatus(True, 0), 0.66)
        assert due_reason(item) == DueReason.EXAM_URGENT

    def test_new_topic(self, make_topic, make_subject, now) -> None:
        item = self._ranked(make_topic, make_subject, now, DueStatus(True, 0), 0.5)
        assert due_reason(item) == DueReason.NEW_TOPIC

    def test_scheduled_review(self, make_topic, make_subject, now) -> None:
        item = self._ranked(
            make_topic, make_subject, now, DueStatus(True, 0), 0.0,
            review_count=3, status="reviewing", last_reviewed_at=now - timedelta(days=14),
        )
        assert due_reason(item) == DueReason.SCHEDULED_REVIEW

    def test_custom_threshold(self, make_topic, make_subject, now) -> None:
        item = self._ranked(make_topic, make_subject, now, DueStatus(True, 0), 0.5)
        assert due_reason(item, exam_urgent_threshold=0.4) == DueReason.EXAM_URGENT
