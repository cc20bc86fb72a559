from sqlalchemy.orm import Session
from studynow.models import ReviewLog
from studynow.schemas import TopicSnapshot
from typing import List, Optional

def add_review_log(db: Session, user_id: int, topic: TopicSnapshot) -> ReviewLog:
    """Append a log entry for a topic that was just reviewed (commit is left to the caller)"""
    log = ReviewLog(
        user_id=user_id,
        topic_id=topic.id,
        reviewed_at=topic.last_reviewed_at,
        review_count=topic.review_count,
        interval_days=(topic.next_due_at - topic.last_reviewed_at).days,
        next_due_at=topic.next_due_at
    )
    db.add(log)
    return log

def get_review_logs(db: Session, user_id: int, topic_id: Optional[int] = None, limit: int = 50) -> List[ReviewLog]:
    """Get recent reviews for a user, newest first"""
    query = db.query(ReviewLog).filter(ReviewLog.user_id == user_id)
    if topic_id is not None:
        query = query.filter(ReviewLog.topic_id == topic_id)
    return query.order_by(ReviewLog.reviewed_at.desc(), ReviewLog.id.desc()).limit(limit).all()
