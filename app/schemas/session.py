from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Page scripts post camelCase; snake_case is accepted as well."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# ======================
# SESSION REQUEST MODELS
# ======================

class SessionRequest(CamelRequest):
    # Absent fields reach the lifecycle check, which names them all at once
    provider_id: Optional[int] = None
    skill_id: Optional[int] = None
    session_date_time: Optional[datetime] = None
    location_type: Optional[str] = None
    meeting_url: Optional[str] = None

class SessionConfirm(CamelRequest):
    session_id: int
    meeting_url: Optional[str] = None

class SessionDeny(CamelRequest):
    session_id: int
    reason: Optional[str] = None

class SessionComplete(CamelRequest):
    session_id: int

# ======================
# SESSION RESPONSE MODELS
# ======================

class SessionResponse(CamelModel):
    id: int
    provider_id: int
    requester_id: int
    skill_id: int
    session_date_time: datetime
    location_type: str
    status: str
    meeting_url: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SessionDetail(SessionResponse):
    """Session list entry with display names for the dashboard."""
    provider_name: Optional[str] = None
    requester_name: Optional[str] = None
    skill_title: Optional[str] = None
    has_rating: bool = False
