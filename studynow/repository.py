from typing import List, Optional, Protocol

from sqlalchemy.orm import Session

from studynow import crud
from studynow.exceptions import TopicNotFoundError
from studynow.schemas import Preferences, SubjectSnapshot, TopicSnapshot


class StudyRepository(Protocol):
    """Data access the schedule engine depends on, scoped per user"""

    def get_subjects(self, user_id: int) -> List[SubjectSnapshot]: ...

    def get_topics(self, user_id: int) -> List[TopicSnapshot]: ...

    def get_topic(self, user_id: int, topic_id: int) -> Optional[TopicSnapshot]: ...

    def get_preferences(self, user_id: int) -> Optional[Preferences]: ...

    def save_topic(self, topic: TopicSnapshot) -> None: ...


class SqlStudyRepository:
    """StudyRepository backed by a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def get_subjects(self, user_id: int) -> List[SubjectSnapshot]:
        return [SubjectSnapshot.model_validate(s) for s in crud.get_subjects(self.db, user_id)]

    def get_topics(self, user_id: int) -> List[TopicSnapshot]:
        return [TopicSnapshot.model_validate(t) for t in crud.get_topics(self.db, user_id)]

    def get_topic(self, user_id: int, topic_id: int) -> Optional[TopicSnapshot]:
        db_topic = crud.get_topic(self.db, user_id, topic_id)
        if db_topic is None:
            return None
        return TopicSnapshot.model_validate(db_topic)

    def get_preferences(self, user_id: int) -> Optional[Preferences]:
        db_prefs = crud.get_preferences(self.db, user_id)
        if db_prefs is None:
            return None
        return Preferences.model_validate(db_prefs)

    def save_topic(self, topic: TopicSnapshot) -> None:
        """Write a reviewed topic and its review log entry in one transaction"""
        if not crud.save_topic_review(self.db, topic.user_id, topic):
            self.db.rollback()
            raise TopicNotFoundError(topic.id, topic.user_id)
        crud.add_review_log(self.db, topic.user_id, topic)
        self.db.commit()
