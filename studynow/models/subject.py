from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from studynow.database import Base
from studynow.timeutils import utcnow

class Subject(Base):
    """Course a user studies for, optionally with an exam date"""
    __tablename__ = "subjects"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    exam_date = Column(DateTime)  # null when no exam is scheduled
    created_at = Column(DateTime, default=utcnow)
    
    user = relationship("User", back_populates="subjects")
    # Deleting a subject removes its topics
    topics = relationship("Topic", back_populates="subject", cascade="all, delete-orphan")
