"""Shared fixtures: an in-memory database and snapshot factories."""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studynow.database import init_db
from studynow.schemas import SubjectSnapshot, TopicSnapshot

NOW = datetime(2026, 3, 1, 9, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_subject(now):
    def _make(id=1, name="Physics", exam_in_days=None, exam_date=None):
        if exam_date is None and exam_in_days is not None:
            exam_date = now + timedelta(days=exam_in_days)
        return SubjectSnapshot(id=id, name=name, exam_date=exam_date)
    return _make


@pytest.fixture
def make_topic(now):
    def _make(
        id=1,
        subject_id=1,
        name=None,
        difficulty="medium",
        review_count=0,
        status="new",
        last_reviewed_at=None,
        next_due_at=None,
    ):
        return TopicSnapshot(
            id=id,
            subject_id=subject_id,
            name=name or f"Topic {id}",
            difficulty=difficulty,
            review_count=review_count,
            status=status,
            last_reviewed_at=last_reviewed_at,
            next_due_at=next_due_at or now,
        )
    return _make
