from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

# ======================
# SKILL SCHEMAS
# ======================

class SkillBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    category: Optional[str] = "General"

class SkillCreate(SkillBase):
    model_config = ConfigDict(extra="forbid")

class Skill(SkillBase):
    id: int

    model_config = ConfigDict(from_attributes=True)

# ======================
# USER_SKILL SCHEMAS
# ======================

class UserSkillEntry(BaseModel):
    """One row of an offered/sought list as submitted by the profile editor."""
    skill_id: int
    is_virtual_only: bool = False
    is_inperson_only: bool = False

    model_config = ConfigDict(extra="forbid")

class UserSkillsReplace(BaseModel):
    offered: List[UserSkillEntry] = []
    sought: List[UserSkillEntry] = []

    model_config = ConfigDict(extra="forbid")

class UserSkill(BaseModel):
    id: int
    skill_id: int
    title: str
    category: Optional[str] = None
    is_virtual_only: bool = False
    is_inperson_only: bool = False

class UserSkills(BaseModel):
    offered: List[UserSkill] = []
    sought: List[UserSkill] = []

# ======================
# RESPONSE MODELS
# ======================

class SkillWithProviderCount(Skill):
    provider_count: int

class SkillMatch(BaseModel):
    """A user offering a skill the current user is looking for."""
    user_id: int
    user_name: str
    avatar_style: Optional[str] = None
    skill_id: int
    skill_title: str
    is_virtual_only: bool = False
    is_inperson_only: bool = False

class TopTeacher(BaseModel):
    user_id: int
    user_name: str
    avatar_style: Optional[str] = None
    total_likes: int
    total_ratings: int
