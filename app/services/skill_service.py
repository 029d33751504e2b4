"""
Skill Service Layer
Offered/sought skill lists, search, matching and the top-teacher board
"""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session, aliased

from app import models, schemas
from app.schemas.skill import UserSkillEntry
from app.config import settings
from app.crud import rating as rating_crud
from app.crud import skill as skill_crud
from app.database import transaction
from app.models.skill import SKILL_TYPE_OFFERED, SKILL_TYPE_SOUGHT

logger = logging.getLogger(__name__)


def _serialize_user_skill(link: models.UserSkill) -> Dict[str, Any]:
    return {
        "id": link.id,
        "skill_id": link.skill_id,
        "title": link.skill.title if link.skill else "N/A",
        "category": link.skill.category if link.skill else "General",
        "is_virtual_only": bool(link.is_virtual_only),
        "is_inperson_only": bool(link.is_inperson_only),
    }


def get_user_skill_lists(db: Session, user_id: int) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "offered": [
            _serialize_user_skill(link)
            for link in skill_crud.get_user_skills(db, user_id, SKILL_TYPE_OFFERED)
        ],
        "sought": [
            _serialize_user_skill(link)
            for link in skill_crud.get_user_skills(db, user_id, SKILL_TYPE_SOUGHT)
        ],
    }


def _dedupe_entries(entries: List[UserSkillEntry]) -> List[UserSkillEntry]:
    seen = set()
    unique = []
    for entry in entries:
        if entry.skill_id in seen:
            continue
        seen.add(entry.skill_id)
        unique.append(entry)
    return unique


def replace_user_skills(
    db: Session,
    user_id: int,
    payload: schemas.UserSkillsReplace,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Replace both skill lists of a user.

    Existing rows are deleted and the submitted ones inserted inside a
    single transaction; an unknown skill id leaves the old lists untouched.

    Raises:
        ValueError: A submitted skill id does not exist
    """
    lists = {
        SKILL_TYPE_OFFERED: _dedupe_entries(payload.offered),
        SKILL_TYPE_SOUGHT: _dedupe_entries(payload.sought),
    }

    with transaction(db):
        for skill_type, entries in lists.items():
            skill_crud.delete_user_skills(db, user_id, skill_type)
            for entry in entries:
                if not skill_crud.get_skill(db, entry.skill_id):
                    raise ValueError(f"Skill {entry.skill_id} not found")
                skill_crud.add_user_skill(
                    db,
                    user_id=user_id,
                    skill_id=entry.skill_id,
                    skill_type=skill_type,
                    is_virtual_only=entry.is_virtual_only,
                    is_inperson_only=entry.is_inperson_only,
                )

    logger.info(
        "User %s skills replaced (%d offered, %d sought)",
        user_id,
        len(lists[SKILL_TYPE_OFFERED]),
        len(lists[SKILL_TYPE_SOUGHT]),
    )
    return get_user_skill_lists(db, user_id)


def find_matches(db: Session, user_id: int) -> List[Dict[str, Any]]:
    """Other users offering a skill that ``user_id`` is seeking."""
    sought = aliased(models.UserSkill)
    offered = aliased(models.UserSkill)

    rows = (
        db.query(offered, models.User, models.Skill)
        .join(
            sought,
            (sought.skill_id == offered.skill_id)
            & (sought.skill_type == SKILL_TYPE_SOUGHT)
            & (sought.user_id == user_id),
        )
        .join(models.User, models.User.id == offered.user_id)
        .join(models.Skill, models.Skill.id == offered.skill_id)
        .filter(
            offered.skill_type == SKILL_TYPE_OFFERED,
            offered.user_id != user_id,
            models.User.is_active.is_(True),
        )
        .order_by(models.Skill.title.asc(), models.User.name.asc())
        .all()
    )

    return [
        {
            "user_id": user.id,
            "user_name": user.name,
            "avatar_style": user.avatar_style,
            "skill_id": skill.id,
            "skill_title": skill.title,
            "is_virtual_only": bool(link.is_virtual_only),
            "is_inperson_only": bool(link.is_inperson_only),
        }
        for link, user, skill in rows
    ]


def get_top_teachers(db: Session, limit: int = None) -> List[Dict[str, Any]]:
    rows = rating_crud.get_top_rated_users(db, limit or settings.TOP_TEACHERS_LIMIT)
    return [
        {
            "user_id": user.id,
            "user_name": user.name,
            "avatar_style": user.avatar_style,
            "total_likes": int(total_likes or 0),
            "total_ratings": int(total_ratings or 0),
        }
        for user, total_likes, total_ratings in rows
    ]
