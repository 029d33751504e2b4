from sqlalchemy import Column, Integer, String, Boolean, Date, TIMESTAMP, func
from sqlalchemy.orm import relationship
from app.database import Base


# ---------------- USER (AUTH TABLE) ----------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student")
    is_active = Column(Boolean, default=True)

    # Profile fields shown on the public profile page
    date_of_birth = Column(Date)
    grade_level = Column(String(50))
    school_college = Column(String(150))
    avatar_style = Column(String(30), default="bottts")

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    # Deleting a user removes their skill links and both sides of their sessions
    user_skills = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")
    provided_sessions = relationship(
        "Session",
        foreign_keys="Session.provider_id",
        back_populates="provider",
        cascade="all, delete",
    )
    requested_sessions = relationship(
        "Session",
        foreign_keys="Session.requester_id",
        back_populates="requester",
        cascade="all, delete",
    )

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() == "admin"
