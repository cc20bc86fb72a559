from sqlalchemy.orm import Session
from studynow.models import Topic
from studynow.schemas import TopicCreate, TopicSnapshot, TopicUpdate
from studynow.timeutils import utcnow
from datetime import datetime
from typing import List, Optional

def create_topic(db: Session, user_id: int, topic: TopicCreate, now: Optional[datetime] = None) -> Topic:
    """Create a never-reviewed topic; it is due immediately"""
    created_at = now or utcnow()
    db_topic = Topic(
        user_id=user_id,
        subject_id=topic.subject_id,
        name=topic.name,
        difficulty=topic.difficulty.value,
        review_count=0,
        status="new",
        last_reviewed_at=None,
        next_due_at=created_at,
        created_at=created_at
    )
    db.add(db_topic)
    db.commit()
    db.refresh(db_topic)
    return db_topic

def get_topic(db: Session, user_id: int, topic_id: int) -> Optional[Topic]:
    """Get one of the user's topics"""
    return db.query(Topic).filter(
        Topic.id == topic_id,
        Topic.user_id == user_id
    ).first()

def get_topics(db: Session, user_id: int, subject_id: Optional[int] = None) -> List[Topic]:
    """Get all topics for user, optionally limited to one subject"""
    query = db.query(Topic).filter(Topic.user_id == user_id)
    if subject_id is not None:
        query = query.filter(Topic.subject_id == subject_id)
    return query.order_by(Topic.subject_id, Topic.name).all()

def update_topic(db: Session, user_id: int, topic_id: int, changes: TopicUpdate) -> Optional[Topic]:
    """Rename, re-grade or move a topic; review state is left alone"""
    db_topic = get_topic(db, user_id, topic_id)
    if db_topic:
        if changes.name is not None:
            db_topic.name = changes.name
        if changes.difficulty is not None:
            db_topic.difficulty = changes.difficulty.value
        if changes.subject_id is not None:
            db_topic.subject_id = changes.subject_id
        db.commit()
        db.refresh(db_topic)
    return db_topic

def delete_topic(db: Session, user_id: int, topic_id: int) -> bool:
    """Delete a topic"""
    db_topic = get_topic(db, user_id, topic_id)
    if not db_topic:
        return False
    db.delete(db_topic)
    db.commit()
    return True

def save_topic_review(db: Session, user_id: int, topic: TopicSnapshot) -> bool:
    """
    Persist a reviewed topic's review state as one atomic row update.
    
    Concurrent reviews of the same topic are last-write-wins.
    
    Returns:
        False when the topic no longer exists for this user
    """
    updated = db.query(Topic).filter(
        Topic.id == topic.id,
        Topic.user_id == user_id
    ).update({
        Topic.review_count: topic.review_count,
        Topic.status: topic.status.value,
        Topic.last_reviewed_at: topic.last_reviewed_at,
        Topic.next_due_at: topic.next_due_at
    }, synchronize_session="fetch")
    return updated > 0
