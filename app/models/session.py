# app/models/session.py
from sqlalchemy import (
    Column, Integer, String, Text, ForeignKey, TIMESTAMP, CheckConstraint, func,
)
from sqlalchemy.orm import relationship
from app.database import Base

# Persisted status literals; stored data depends on these exact values.
STATUS_REQUESTED = "Requested"
STATUS_CONFIRMED = "Confirmed"
STATUS_DENIED = "Denied"
STATUS_CANCELLED = "Cancelled"
STATUS_COMPLETED = "Completed"
SESSION_STATUSES = (
    STATUS_REQUESTED,
    STATUS_CONFIRMED,
    STATUS_DENIED,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
)

LOCATION_ONLINE = "Online"
LOCATION_IN_PERSON = "InPerson"
LOCATION_TYPES = (LOCATION_ONLINE, LOCATION_IN_PERSON)

MEETING_URL_MAX_LENGTH = 255


class Session(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False)
    session_date_time = Column(TIMESTAMP, nullable=False)
    location_type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=STATUS_REQUESTED, index=True)
    meeting_url = Column(String(MEETING_URL_MAX_LENGTH))
    cancellation_reason = Column(Text)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, onupdate=func.now())

    __table_args__ = (
        CheckConstraint("provider_id <> requester_id", name="check_distinct_participants"),
        CheckConstraint(
            "status IN ('Requested', 'Confirmed', 'Denied', 'Cancelled', 'Completed')",
            name="check_session_status",
        ),
        CheckConstraint("location_type IN ('Online', 'InPerson')", name="check_location_type"),
    )

    # Relationships
    provider = relationship("User", foreign_keys=[provider_id], back_populates="provided_sessions")
    requester = relationship("User", foreign_keys=[requester_id], back_populates="requested_sessions")
    skill = relationship("Skill", back_populates="sessions")
    rating = relationship(
        "Rating",
        back_populates="session",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.provider_id, self.requester_id)

    def counterpart_of(self, user_id: int) -> int:
        return self.provider_id if user_id == self.requester_id else self.requester_id
