from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from studynow.database import Base
from studynow.timeutils import utcnow

class Topic(Base):
    """Spaced repetition tracking per topic"""
    __tablename__ = "topics"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    difficulty = Column(String, nullable=False, default="medium")  # easy, medium, hard
    
    # Review state, written only by the "mark reviewed" action
    review_count = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="new")  # new, learning, reviewing, mastered
    last_reviewed_at = Column(DateTime)
    next_due_at = Column(DateTime, nullable=False)
    
    created_at = Column(DateTime, default=utcnow)
    
    user = relationship("User", back_populates="topics")
    subject = relationship("Subject", back_populates="topics")
    review_logs = relationship("ReviewLog", back_populates="topic", cascade="all, delete-orphan")
