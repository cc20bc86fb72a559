"""Tests for lenient preference parsing."""
import pytest

from studynow.schemas import (
    Preferences,
    PreferencesUpdate,
    PriorityWeight,
    ReviewFrequency,
    parse_goal_minutes,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (90, 90),
        ("45", 45),
        ("30 minutes", 30),
        ("1 hour", 60),
        ("2 hours", 120),
        ("4+ hours", 240),
        ("1.5h", 90),
        (-15, 0),
        ("-5", 0),
        ("lots", 60),
        (None, 60),
        (True, 60),
    ],
)
def test_parse_goal_minutes(value, expected) -> None:
    assert parse_goal_minutes(value) == expected


def test_defaults() -> None:
    prefs = Preferences()
    assert prefs.daily_study_goal_minutes == 60
    assert prefs.topic_priority_weight == PriorityWeight.BALANCED
    assert prefs.review_frequency == ReviewFrequency.STANDARD
    assert prefs.reminder_time == "09:00"


def test_legacy_labels() -> None:
    prefs = Preferences(
        daily_study_goal_minutes="4+ hours",
        topic_priority_weight="Focus on Easy Topics",
        review_frequency="Intensive",
    )
    assert prefs.daily_study_goal_minutes == 240
    assert prefs.topic_priority_weight == PriorityWeight.EASY_FOCUS
    assert prefs.review_frequency == ReviewFrequency.INTENSIVE


def test_malformed_fields_fall_back_to_defaults() -> None:
    prefs = Preferences(
        daily_study_goal_minutes={"minutes": 30},
        topic_priority_weight="whatever",
        review_frequency=3,
        reminder_time="25:99",
    )
    assert prefs == Preferences()


def test_update_keeps_only_given_fields() -> None:
    changes = PreferencesUpdate(review_frequency="frequent", reminder_time="not a time")
    assert changes.model_dump(exclude_none=True) == {"review_frequency": ReviewFrequency.FREQUENT}


def test_update_drops_every_unrecognised_field() -> None:
    changes = PreferencesUpdate(
        daily_study_goal_minutes="lots",
        topic_priority_weight="sideways",
        review_frequency="hourly",
        reminder_time="7pm",
    )
    assert changes.model_dump(exclude_none=True) == {}
