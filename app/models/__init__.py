# app/models/__init__.py
# Import models in dependency order
from .user import User
from .skill import Skill, UserSkill
from .session import Session
from .rating import Rating

__all__ = ["User", "Skill", "UserSkill", "Session", "Rating"]
