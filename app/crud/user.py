from typing import List, Optional

from sqlalchemy.orm import Session
from app import models, schemas
from app.utils.security import get_password_hash


def create_user(db: Session, user: schemas.UserCreate, role: str = "student") -> models.User:
    db_user = models.User(
        name=user.name.strip(),
        email=user.email.strip().lower(),
        password_hash=get_password_hash(user.password),
        role=role,
        is_active=True,
        date_of_birth=user.date_of_birth,
        grade_level=user.grade_level,
        school_college=user.school_college,
        avatar_style=user.avatar_style or "bottts",
    )
    db.add(db_user)
    db.flush()
    return db_user

def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email.strip().lower()).first()

def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()

def list_users(db: Session, skip: int = 0, limit: int = 100) -> List[models.User]:
    return db.query(models.User).order_by(models.User.id.asc()).offset(skip).limit(limit).all()

def update_user_profile(db: Session, user: models.User, profile_update: schemas.UserProfileUpdate) -> models.User:
    update_data = profile_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user

def delete_user(db: Session, user_id: int) -> bool:
    user = get_user(db, user_id)
    if not user:
        return False
    db.delete(user)
    db.commit()
    return True
