from sqlalchemy.orm import Session
from studynow.models import Subject
from studynow.schemas import SubjectCreate, SubjectUpdate
from typing import List, Optional

def create_subject(db: Session, user_id: int, subject: SubjectCreate) -> Subject:
    """Create a subject owned by user_id"""
    db_subject = Subject(user_id=user_id, **subject.model_dump())
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    return db_subject

def get_subject(db: Session, user_id: int, subject_id: int) -> Optional[Subject]:
    """Get one of the user's subjects"""
    return db.query(Subject).filter(
        Subject.id == subject_id,
        Subject.user_id == user_id
    ).first()

def get_subjects(db: Session, user_id: int) -> List[Subject]:
    """Get all subjects for user"""
    return db.query(Subject).filter(
        Subject.user_id == user_id
    ).order_by(Subject.name).all()

def update_subject(db: Session, user_id: int, subject_id: int, changes: SubjectUpdate) -> Optional[Subject]:
    """Rename a subject or change its exam date"""
    db_subject = get_subject(db, user_id, subject_id)
    if db_subject:
        if changes.name is not None:
            db_subject.name = changes.name
        if changes.clear_exam_date:
            db_subject.exam_date = None
        elif changes.exam_date is not None:
            db_subject.exam_date = changes.exam_date
        db.commit()
        db.refresh(db_subject)
    return db_subject

def delete_subject(db: Session, user_id: int, subject_id: int) -> bool:
    """Delete a subject together with its topics"""
    db_subject = get_subject(db, user_id, subject_id)
    if not db_subject:
        return False
    db.delete(db_subject)
    db.commit()
    return True
