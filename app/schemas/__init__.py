# app/schemas/__init__.py

# User schemas
from .user import (
    User,
    UserCreate,
    UserBase,
    UserProfileUpdate,
)

# Auth schemas
from .auth import Token, TokenData, LoginRequest

# Skill schemas
from .skill import (
    Skill,
    SkillCreate,
    UserSkill,
    UserSkills,
    UserSkillsReplace,
)

# Session & rating schemas
from .session import (
    SessionRequest,
    SessionConfirm,
    SessionDeny,
    SessionComplete,
    SessionResponse,
    SessionDetail,
)
from .rating import RatingCreate, RatingResponse, RatingSummaryResponse

__all__ = [
    "User",
    "UserCreate",
    "UserBase",
    "UserProfileUpdate",
    "Token",
    "TokenData",
    "LoginRequest",
    "Skill",
    "SkillCreate",
    "UserSkill",
    "UserSkills",
    "UserSkillsReplace",
    "SessionRequest",
    "SessionConfirm",
    "SessionDeny",
    "SessionComplete",
    "SessionResponse",
    "SessionDetail",
    "RatingCreate",
    "RatingResponse",
    "RatingSummaryResponse",
]
