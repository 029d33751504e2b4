from sqlalchemy import (
    Column, Integer, String, Text, Boolean, ForeignKey, TIMESTAMP,
    UniqueConstraint, CheckConstraint, func,
)
from sqlalchemy.orm import relationship
from app.database import Base

SKILL_TYPE_OFFERED = "offered"
SKILL_TYPE_SOUGHT = "sought"
SKILL_TYPES = (SKILL_TYPE_OFFERED, SKILL_TYPE_SOUGHT)


# app/models/skill.py
class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text)
    category = Column(String(50), default="General")
    created_at = Column(TIMESTAMP, server_default=func.now())

    user_skills = relationship("UserSkill", back_populates="skill", cascade="all, delete-orphan")
    sessions = relationship("Session", back_populates="skill")


class UserSkill(Base):
    __tablename__ = "user_skills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    skill_id = Column(
        Integer,
        ForeignKey("skills.id", ondelete="CASCADE"),
        index=True,
        nullable=False
    )
    skill_type = Column(String(20), nullable=False)  # 'offered' or 'sought'
    is_virtual_only = Column(Boolean, default=False, nullable=False)
    is_inperson_only = Column(Boolean, default=False, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "skill_id", "skill_type", name="uq_user_skill_type"),
        CheckConstraint("skill_type IN ('offered', 'sought')", name="check_skill_type"),
    )

    # Relationships
    skill = relationship("Skill", back_populates="user_skills")
    user = relationship("User", back_populates="user_skills")
