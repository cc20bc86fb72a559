"""Tests for studynow.scheduler (pure schedule generation)."""
import random
from datetime import timedelta

import pytest

from studynow.config import Settings
from studynow.exceptions import DataIntegrityError
from studynow.scheduler import SchedulerConfig, StudyScheduler, generate_schedule
from studynow.schemas import DueReason, Preferences


def test_exam_close_topic_ranks_first(make_subject, make_topic, now) -> None:
    physics = make_subject(id=1, name="Physics", exam_in_days=5)
    math_ = make_subject(id=2, name="Math", exam_in_days=30)
    kinematics = make_topic(id=10, subject_id=1, name="Kinematics", difficulty="hard")
    algebra = make_topic(id=11, subject_id=2, name="Algebra", difficulty="medium")

    result = generate_schedule(
        [physics, math_],
        [algebra, kinematics],
        Preferences(daily_study_goal_minutes=60, topic_priority_weight="balanced"),
        now,
    )

    assert [e.topic_id for e in result.entries] == [10, 11]
    kinematics_entry, algebra_entry = result.entries
    # due 1 + urgency (1 - 5/30) * 2 + hard 3 + newness 0.5
    assert kinematics_entry.priority_score == pytest.approx(1 + (1 - 5 / 30) * 2 + 3 + 0.5, abs=1e-4)
    assert algebra_entry.priority_score == pytest.approx(3.5)
    assert kinematics_entry.due_reason == DueReason.EXAM_URGENT
    assert algebra_entry.due_reason == DueReason.NEW_TOPIC
    assert result.total_minutes <= 60


def test_topic_reviewed_recently_is_left_out(make_subject, make_topic, now) -> None:
    topic = make_topic(
        review_count=2,
        status="learning",
        difficulty="medium",
        last_reviewed_at=now - timedelta(days=6),
        next_due_at=now + timedelta(days=1),
    )
    result = generate_schedule([make_subject()], [topic], Preferences(review_frequency="standard"), now)
    assert result.entries == []


def test_no_data_gives_empty_schedule(now) -> None:
    result = generate_schedule([], [], None, now)
    assert result.entries == []
    assert result.integrity_issues == []
    assert result.to_json() == []


def test_missing_preferences_use_default_goal(make_subject, make_topic, now) -> None:
    topics = [make_topic(id=i) for i in range(1, 7)]
    result = generate_schedule([make_subject()], topics, None, now)
    assert result.total_minutes == 60
    assert len(result.entries) == 4


def test_goal_label_from_web_client(make_subject, make_topic, now) -> None:
    result = generate_schedule([make_subject()], [make_topic()], Preferences(daily_study_goal_minutes="2 hours"), now)
    assert result.total_minutes == 120


def test_zero_goal_gives_empty_schedule(make_subject, make_topic, now) -> None:
    result = generate_schedule([make_subject()], [make_topic()], Preferences(daily_study_goal_minutes=0), now)
    assert result.entries == []


def test_json_uses_camel_case_keys(make_subject, make_topic, now) -> None:
    result = generate_schedule([make_subject(id=3)], [make_topic(id=8, subject_id=3)], None, now)
    assert result.to_json() == [{
        "topicId": 8,
        "subjectId": 3,
        "allocatedMinutes": 60,
        "priorityScore": 3.5,
        "dueReason": "new-topic",
    }]


def test_orphaned_topics_are_reported(make_subject, make_topic, now) -> None:
    result = generate_schedule([make_subject(id=1)], [make_topic(id=1), make_topic(id=2, subject_id=42)], None, now)

    assert [e.topic_id for e in result.entries] == [1]
    assert [issue.topic_id for issue in result.integrity_issues] == [2]
    with pytest.raises(DataIntegrityError) as excinfo:
        result.raise_for_integrity()
    assert excinfo.value.issues == result.integrity_issues


def test_clean_result_does_not_raise(make_subject, make_topic, now) -> None:
    generate_schedule([make_subject()], [make_topic()], None, now).raise_for_integrity()


def test_same_input_in_any_order_gives_same_schedule(make_subject, make_topic, now) -> None:
    subjects = [make_subject(id=i, exam_in_days=i * 4) for i in range(1, 5)]
    topics = [
        make_topic(
            id=i,
            subject_id=(i % 4) + 1,
            difficulty=("easy", "medium", "hard")[i % 3],
        )
        for i in range(1, 13)
    ]
    prefs = Preferences(daily_study_goal_minutes=90)
    expected = generate_schedule(subjects, topics, prefs, now).entries

    rng = random.Random(7)
    for _ in range(5):
        rng.shuffle(topics)
        rng.shuffle(subjects)
        assert generate_schedule(subjects, topics, prefs, now).entries == expected


def test_config_from_settings_changes_slots(make_subject, make_topic, now) -> None:
    config = SchedulerConfig.from_settings(Settings(target_slot_count=2, min_slot_minutes=15))
    scheduler = StudyScheduler(config)
    topics = [make_topic(id=i) for i in range(1, 5)]

    result = scheduler.generate_schedule([make_subject()], topics, Preferences(daily_study_goal_minutes=60), now)

    assert [e.allocated_minutes for e in result.entries] == [30, 30]


def test_default_goal_comes_from_config(make_subject, make_topic, now) -> None:
    scheduler = StudyScheduler(SchedulerConfig(default_daily_goal_minutes=30))
    result = scheduler.generate_schedule([make_subject()], [make_topic()], None, now)
    assert result.total_minutes == 30
