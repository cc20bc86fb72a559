from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from studynow.database import Base
from studynow.timeutils import utcnow

class ReviewLog(Base):
    """Record of a completed topic review"""
    __tablename__ = "review_logs"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    topic_id = Column(Integer, ForeignKey("topics.id"), nullable=False)
    
    reviewed_at = Column(DateTime, nullable=False)
    review_count = Column(Integer, nullable=False)  # count after this review
    interval_days = Column(Integer, nullable=False)
    next_due_at = Column(DateTime, nullable=False)
    
    created_at = Column(DateTime, default=utcnow)
    
    user = relationship("User", back_populates="review_logs")
    topic = relationship("Topic", back_populates="review_logs")
