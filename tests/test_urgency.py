"""Tests for studynow.urgency."""
import pytest

from studynow.urgency import exam_urgency, subject_urgencies


def test_no_exam_means_no_urgency(make_subject, now) -> None:
    assert exam_urgency(make_subject(), now) == 0.0


@pytest.mark.parametrize("days", [0, -1, -30])
def test_exam_today_or_past_is_maximal(make_subject, now, days) -> None:
    assert exam_urgency(make_subject(exam_in_days=days), now) == 1.0


def test_urgency_ramps_inside_horizon(make_subject, now) -> None:
    assert exam_urgency(make_subject(exam_in_days=5), now) == pytest.approx(1 - 5 / 30)
    assert exam_urgency(make_subject(exam_in_days=15), now) == pytest.approx(0.5)


@pytest.mark.parametrize("days", [30, 31, 365])
def test_exam_at_or_beyond_horizon_is_not_urgent(make_subject, now, days) -> None:
    assert exam_urgency(make_subject(exam_in_days=days), now) == 0.0


def test_urgency_decreases_as_exam_moves_away(make_subject, now) -> None:
    values = [exam_urgency(make_subject(exam_in_days=d), now) for d in range(-2, 40)]
    assert values == sorted(values, reverse=True)
    assert all(0.0 <= v <= 1.0 for v in values)


def test_custom_horizon(make_subject, now) -> None:
    assert exam_urgency(make_subject(exam_in_days=5), now, horizon_days=10) == pytest.approx(0.5)


def test_subject_urgencies_by_id(make_subject, now) -> None:
    urgencies = subject_urgencies(
        [make_subject(id=1, exam_in_days=3), make_subject(id=2)],
        now,
    )
    assert urgencies[1] == pytest.approx(0.9)
    assert urgencies[2] == 0.0
