# app/api/session.py
"""
Session Lifecycle API

Endpoints:
- POST /api/sessions/request - Request a session from a provider
- POST /api/sessions/confirm - Provider confirms a request
- POST /api/sessions/deny - Deny, withdraw or cancel
- POST /api/sessions/complete - Mark a confirmed session completed
- POST /api/sessions/rate - Rate a completed session
- GET /api/sessions - Sessions of the current user
- GET /api/sessions/{session_id} - One session
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.session import SESSION_STATUSES, Session as SessionModel
from app.models.user import User
from app.schemas.rating import RatingCreate, RatingResponse
from app.schemas.session import (
    SessionComplete,
    SessionConfirm,
    SessionDeny,
    SessionDetail,
    SessionRequest,
    SessionResponse,
)
from app.services import session_lifecycle
from app.services.session_lifecycle import SessionLifecycleError
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


# ======================
# HELPER FUNCTIONS
# ======================
def _to_http_error(exc: SessionLifecycleError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


def _server_error(db: Session, action: str, session_id: Optional[int]) -> HTTPException:
    db.rollback()
    logger.exception("Session %s failed (session_id=%s)", action, session_id)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


def _to_detail(session: SessionModel) -> SessionDetail:
    return SessionDetail(
        id=session.id,
        provider_id=session.provider_id,
        requester_id=session.requester_id,
        skill_id=session.skill_id,
        session_date_time=session.session_date_time,
        location_type=session.location_type,
        status=session.status,
        meeting_url=session.meeting_url,
        cancellation_reason=session.cancellation_reason,
        created_at=session.created_at,
        updated_at=session.updated_at,
        provider_name=session.provider.name if session.provider else None,
        requester_name=session.requester.name if session.requester else None,
        skill_title=session.skill.title if session.skill else None,
        has_rating=session.rating is not None,
    )


# ======================
# SESSION LISTING
# ======================
@router.get("", response_model=List[SessionDetail])
def get_my_sessions(
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Sessions where the current user is provider or requester"""
    if status_filter and status_filter not in SESSION_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"status must be one of: {', '.join(SESSION_STATUSES)}"
        )
    sessions = session_lifecycle.list_sessions_for_user(db, current_user.id, status_filter)
    return [_to_detail(s) for s in sessions]


@router.get("/{session_id}", response_model=SessionDetail)
def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        session = session_lifecycle.get_session(
            db, session_id, current_user.id, is_admin=current_user.is_admin
        )
    except SessionLifecycleError as e:
        raise _to_http_error(e)
    return _to_detail(session)


# ======================
# CREATE SESSION REQUEST
# ======================
@router.post("/request", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def request_session(
    payload: SessionRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return session_lifecycle.request_session(
            db,
            requester_id=current_user.id,
            provider_id=payload.provider_id,
            skill_id=payload.skill_id,
            session_date_time=payload.session_date_time,
            location_type=payload.location_type,
            meeting_url=payload.meeting_url,
        )
    except SessionLifecycleError as e:
        raise _to_http_error(e)
    except SQLAlchemyError:
        raise _server_error(db, "request", None)


# ======================
# CONFIRM SESSION
# ======================
@router.post("/confirm", response_model=SessionResponse)
def confirm_session(
    payload: SessionConfirm,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return session_lifecycle.confirm_session(
            db,
            session_id=payload.session_id,
            acting_user_id=current_user.id,
            meeting_url=payload.meeting_url,
        )
    except SessionLifecycleError as e:
        raise _to_http_error(e)
    except SQLAlchemyError:
        raise _server_error(db, "confirm", payload.session_id)


# ======================
# DENY / CANCEL SESSION
# ======================
@router.post("/deny", response_model=SessionResponse)
def deny_session(
    payload: SessionDeny,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Requester withdrawing a request -> Cancelled,
    provider rejecting a request -> Denied,
    either party leaving a confirmed session -> Cancelled.
    """
    try:
        return session_lifecycle.deny_or_cancel_session(
            db,
            session_id=payload.session_id,
            acting_user_id=current_user.id,
            reason=payload.reason,
        )
    except SessionLifecycleError as e:
        raise _to_http_error(e)
    except SQLAlchemyError:
        raise _server_error(db, "deny", payload.session_id)


# ======================
# COMPLETE SESSION
# ======================
@router.post("/complete", response_model=SessionResponse)
def complete_session(
    payload: SessionComplete,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return session_lifecycle.complete_session(
            db,
            session_id=payload.session_id,
            acting_user_id=current_user.id,
        )
    except SessionLifecycleError as e:
        raise _to_http_error(e)
    except SQLAlchemyError:
        raise _server_error(db, "complete", payload.session_id)


# ======================
# RATE SESSION
# ======================
@router.post("/rate", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
def rate_session(
    payload: RatingCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The ratee defaults to the other participant of the session."""
    try:
        ratee_id = payload.ratee_id
        if ratee_id is None:
            session = session_lifecycle.get_session(db, payload.session_id, current_user.id)
            ratee_id = session.counterpart_of(current_user.id)

        return session_lifecycle.rate_session(
            db,
            session_id=payload.session_id,
            rater_id=current_user.id,
            ratee_id=ratee_id,
            like_status=payload.like_status,
            feedback_text=payload.feedback_text,
        )
    except SessionLifecycleError as e:
        raise _to_http_error(e)
    except SQLAlchemyError:
        raise _server_error(db, "rate", payload.session_id)
