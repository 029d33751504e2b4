# app/schemas/rating.py
"""
Rating Pydantic Schemas
Request/response models for post-session like/dislike ratings
"""

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from app.schemas.session import CamelModel, CamelRequest


# ======================
# RATING SCHEMAS
# ======================

class RatingCreate(CamelRequest):
    """Rating submitted by a participant after the session completed"""
    session_id: int = Field(..., description="Session identifier")
    ratee_id: Optional[int] = Field(None, description="Defaults to the other participant")
    like_status: bool = Field(..., description="True for a like, False for a dislike")
    feedback_text: Optional[str] = Field(None, max_length=1000, description="Optional comment")

    @field_validator("feedback_text")
    @classmethod
    def strip_feedback(cls, v):
        """Blank feedback is stored as NULL"""
        if v is None:
            return None
        return v.strip() or None


class RatingResponse(CamelModel):
    id: int
    session_id: int
    rater_id: int
    ratee_id: int
    like_status: bool
    feedback_text: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ======================
# SUMMARY SCHEMA
# ======================

class RatingSummaryResponse(CamelModel):
    """Aggregate of ratings received by a user"""
    user_id: int
    total_ratings_received: int = Field(0, description="Number of ratings received")
    total_likes: int = Field(0, description="Number of likes received")
