from sqlalchemy.orm import Session
from studynow.models import UserPreferences
from studynow.schemas import PreferencesUpdate
from typing import Optional

def get_preferences(db: Session, user_id: int) -> Optional[UserPreferences]:
    """Get the user's stored preferences, if any"""
    return db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()

def update_preferences(db: Session, user_id: int, changes: PreferencesUpdate) -> UserPreferences:
    """Create or update the user's preferences record"""
    db_prefs = get_preferences(db, user_id)
    if not db_prefs:
        db_prefs = UserPreferences(user_id=user_id)
        db.add(db_prefs)
    
    for key, value in changes.model_dump(exclude_none=True).items():
        setattr(db_prefs, key, value.value if hasattr(value, "value") else value)
    
    db.commit()
    db.refresh(db_prefs)
    return db_prefs
