import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import models, schemas
from app.crud import skill as skill_crud
from app.database import get_db
from app.schemas.skill import SkillMatch, SkillWithProviderCount
from app.services import skill_service
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Skills"])


# ======================
# GET: All skills with provider count
# ======================
@router.get("/skills", response_model=List[SkillWithProviderCount])
def get_all_skills(db: Session = Depends(get_db)):
    return [
        SkillWithProviderCount(
            id=skill.id,
            title=skill.title,
            description=skill.description or "",
            category=skill.category or "General",
            provider_count=provider_count,
        )
        for skill, provider_count in skill_crud.get_skills_with_provider_count(db)
    ]


# ======================
# POST: Add a skill to the catalog
# ======================
@router.post("/skills", response_model=schemas.Skill, status_code=status.HTTP_201_CREATED)
def add_skill(
    skill: schemas.SkillCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    clean_title = skill.title.strip()
    if not clean_title:
        raise HTTPException(400, "title is required")

    if skill_crud.get_skill_by_title(db, clean_title):
        raise HTTPException(409, f"Skill '{clean_title}' already exists")

    return skill_crud.create_skill(db, skill)


# ======================
# GET: Search skills by title
# ======================
@router.get("/skills/search", response_model=List[schemas.Skill])
def search_skills(
    q: str = Query(..., min_length=1, max_length=100),
    db: Session = Depends(get_db),
):
    return skill_crud.search_skills(db, q)


# ======================
# GET / PUT: My offered and sought skills
# ======================
@router.get("/user/skills", response_model=schemas.UserSkills)
def get_my_skills(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return skill_service.get_user_skill_lists(db, current_user.id)


@router.put("/user/skills", response_model=schemas.UserSkills)
def replace_my_skills(
    payload: schemas.UserSkillsReplace,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return skill_service.replace_user_skills(db, current_user.id, payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError:
        logger.exception("Skill list update failed for user %s", current_user.id)
        raise HTTPException(status_code=500, detail="Internal server error")


# ======================
# GET: Users who can teach what I'm looking for
# ======================
@router.get("/matches", response_model=List[SkillMatch])
def get_matches(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return skill_service.find_matches(db, current_user.id)
