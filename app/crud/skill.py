from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy import and_, func
from app import models, schemas
from app.models.skill import SKILL_TYPE_OFFERED


# ============================
# SKILL TABLE
# ============================

def create_skill(db: Session, skill: schemas.SkillCreate) -> models.Skill:
    new_skill = models.Skill(
        title=skill.title.strip(),
        description=(skill.description or "").strip(),
        category=(skill.category or "General").strip() or "General",
    )
    db.add(new_skill)
    db.commit()
    db.refresh(new_skill)
    return new_skill


def get_skill(db: Session, skill_id: int) -> Optional[models.Skill]:
    return db.query(models.Skill).filter(models.Skill.id == skill_id).first()


def get_skill_by_title(db: Session, title: str) -> Optional[models.Skill]:
    return db.query(models.Skill).filter(
        func.lower(models.Skill.title) == func.lower(title.strip())
    ).first()


def get_skills(db: Session, skip: int = 0, limit: int = 100) -> List[models.Skill]:
    return db.query(models.Skill).order_by(models.Skill.title.asc()).offset(skip).limit(limit).all()


def search_skills(db: Session, term: str, limit: int = 25) -> List[models.Skill]:
    pattern = f"%{term.strip()}%"
    return (
        db.query(models.Skill)
        .filter(models.Skill.title.ilike(pattern))
        .order_by(models.Skill.title.asc())
        .limit(limit)
        .all()
    )


# ============================
# USER SKILLS (OFFERED / SOUGHT)
# ============================

def get_user_skills(db: Session, user_id: int, skill_type: str) -> List[models.UserSkill]:
    return db.query(models.UserSkill).filter(
        models.UserSkill.user_id == user_id,
        models.UserSkill.skill_type == skill_type
    ).order_by(models.UserSkill.id.asc()).all()


def delete_user_skills(db: Session, user_id: int, skill_type: str) -> int:
    return db.query(models.UserSkill).filter(
        models.UserSkill.user_id == user_id,
        models.UserSkill.skill_type == skill_type,
    ).delete(synchronize_session=False)


def add_user_skill(
    db: Session,
    user_id: int,
    skill_id: int,
    skill_type: str,
    is_virtual_only: bool = False,
    is_inperson_only: bool = False,
) -> models.UserSkill:
    user_skill = models.UserSkill(
        user_id=user_id,
        skill_id=skill_id,
        skill_type=skill_type,
        is_virtual_only=is_virtual_only,
        is_inperson_only=is_inperson_only,
    )
    db.add(user_skill)
    return user_skill


# ============================
# EXTRA (ANALYTICS)
# ============================

def get_skills_with_provider_count(db: Session):
    return (
        db.query(
            models.Skill,
            func.count(func.distinct(models.UserSkill.user_id)).label("provider_count"),
        )
        .outerjoin(
            models.UserSkill,
            and_(
                models.UserSkill.skill_id == models.Skill.id,
                models.UserSkill.skill_type == SKILL_TYPE_OFFERED,
            ),
        )
        .group_by(models.Skill.id)
        .order_by(models.Skill.title.asc())
        .all()
    )
