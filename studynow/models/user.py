from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from studynow.database import Base
from studynow.timeutils import utcnow

class User(Base):
    """Account that owns subjects, topics and study preferences"""
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True)
    created_at = Column(DateTime, default=utcnow)
    
    subjects = relationship("Subject", back_populates="user", cascade="all, delete-orphan")
    topics = relationship("Topic", back_populates="user")
    preferences = relationship("UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan")
    review_logs = relationship("ReviewLog", back_populates="user", cascade="all, delete-orphan")
