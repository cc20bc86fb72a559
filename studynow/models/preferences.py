from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from studynow.database import Base

class UserPreferences(Base):
    """Per-user study preferences read by the schedule engine"""
    __tablename__ = "user_preferences"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    daily_study_goal_minutes = Column(Integer, nullable=False, default=60)
    topic_priority_weight = Column(String, nullable=False, default="balanced")
    review_frequency = Column(String, nullable=False, default="standard")
    reminder_time = Column(String, default="09:00")  # HH:MM, used by reminder emails only
    
    user = relationship("User", back_populates="preferences")
