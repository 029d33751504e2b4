# app/services/session_lifecycle.py
"""
Session Lifecycle Service
Owns the status field of a tutoring session and the rating gate.

    Requested -> Confirmed -> Completed
    Requested -> Denied
    Requested | Confirmed -> Cancelled

Denied, Cancelled and Completed are terminal. Every transition is written
with a conditional UPDATE on the expected current status, so of two
concurrent writers only one can win.
"""

import logging
from datetime import datetime, UTC
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.crud import rating as rating_crud
from app.crud import session as session_crud
from app.crud import skill as skill_crud
from app.crud import user as user_crud
from app.models.rating import Rating
from app.models.session import (
    LOCATION_ONLINE,
    LOCATION_TYPES,
    MEETING_URL_MAX_LENGTH,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_DENIED,
    STATUS_REQUESTED,
    Session as SessionModel,
)

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({STATUS_DENIED, STATUS_CANCELLED, STATUS_COMPLETED})

ALLOWED_TRANSITIONS = {
    STATUS_REQUESTED: frozenset({STATUS_CONFIRMED, STATUS_DENIED, STATUS_CANCELLED}),
    STATUS_CONFIRMED: frozenset({STATUS_COMPLETED, STATUS_CANCELLED}),
    STATUS_DENIED: frozenset(),
    STATUS_CANCELLED: frozenset(),
    STATUS_COMPLETED: frozenset(),
}


# ======================
# ERRORS
# ======================

class SessionLifecycleError(ValueError):
    """Base error; ``status_code`` is the HTTP status the API reports."""
    status_code = 400


class ValidationError(SessionLifecycleError):
    status_code = 400


class MissingFields(ValidationError):
    pass


class InvalidParticipants(ValidationError):
    pass


class SelfRating(ValidationError):
    pass


class Forbidden(SessionLifecycleError):
    status_code = 403


class InvalidState(SessionLifecycleError):
    status_code = 400


class NotFound(SessionLifecycleError):
    status_code = 404


class Conflict(SessionLifecycleError):
    status_code = 409


class DuplicateRating(Conflict):
    pass


# ======================
# HELPERS
# ======================

def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def _normalize_datetime(value: datetime) -> datetime:
    """Store naive UTC with whole seconds."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.replace(microsecond=0)


def _clean_url(meeting_url: Optional[str]) -> Optional[str]:
    if meeting_url is None:
        return None
    cleaned = meeting_url.strip()
    if len(cleaned) > MEETING_URL_MAX_LENGTH:
        raise ValidationError(
            f"Meeting URL must be {MEETING_URL_MAX_LENGTH} characters or less"
        )
    return cleaned or None


def _load_session(db: Session, session_id: int) -> SessionModel:
    session = session_crud.get_session(db, session_id)
    if not session:
        raise NotFound("Session not found")
    return session


def _apply_transition(
    db: Session,
    session: SessionModel,
    target: str,
    **values,
) -> SessionModel:
    """
    Move ``session`` to ``target`` with a compare-and-swap on its status.

    The caller has already validated actor and current state against the
    loaded row; a miss here means a concurrent writer changed it first.
    """
    expected = session.status
    if not can_transition(expected, target):
        raise InvalidState(f"Cannot move a {expected} session to {target}")

    values["status"] = target
    values["updated_at"] = datetime.now(UTC).replace(tzinfo=None)
    swapped = session_crud.update_status_if(db, session.id, expected, values)
    if not swapped:
        db.rollback()
        logger.warning(
            "Session %s changed concurrently (expected %s, target %s)",
            session.id,
            expected,
            target,
        )
        current = session_crud.get_session(db, session.id)
        if current is None:
            raise NotFound("Session not found")
        db.refresh(current)
        raise InvalidState(
            f"Session is now {current.status}; it can no longer be moved to {target}"
        )

    db.commit()
    db.refresh(session)
    logger.info("Session %s: %s -> %s", session.id, expected, target)
    return session


# ======================
# TRANSITIONS
# ======================

def request_session(
    db: Session,
    requester_id: int,
    provider_id: int,
    skill_id: int,
    session_date_time: datetime,
    location_type: str,
    meeting_url: Optional[str] = None,
) -> SessionModel:
    """
    Create a session request from ``requester_id`` to ``provider_id``.

    The meeting URL may still be empty for an online session; it is
    required at confirmation instead.

    Raises:
        MissingFields: A required argument is absent
        InvalidParticipants: Requester and provider are the same user
        ValidationError: Unknown location type or oversized URL
        NotFound: Provider or skill does not exist
    """
    required = {
        "requester_id": requester_id,
        "provider_id": provider_id,
        "skill_id": skill_id,
        "session_date_time": session_date_time,
        "location_type": location_type,
    }
    missing = [name for name, value in required.items() if value is None or value == ""]
    if missing:
        raise MissingFields(f"Missing required fields: {', '.join(missing)}")

    if requester_id == provider_id:
        raise InvalidParticipants("Cannot request a session with yourself")

    if location_type not in LOCATION_TYPES:
        raise ValidationError(
            f"location_type must be one of: {', '.join(LOCATION_TYPES)}"
        )

    cleaned_url = _clean_url(meeting_url)

    if not user_crud.get_user(db, provider_id):
        raise NotFound("Provider not found")
    if not skill_crud.get_skill(db, skill_id):
        raise NotFound("Skill not found")

    session = session_crud.create_session(
        db,
        provider_id=provider_id,
        requester_id=requester_id,
        skill_id=skill_id,
        session_date_time=_normalize_datetime(session_date_time),
        location_type=location_type,
        status=STATUS_REQUESTED,
        meeting_url=cleaned_url,
    )
    db.commit()
    db.refresh(session)

    logger.info(
        "Session %s requested by user %s from provider %s (skill %s)",
        session.id,
        requester_id,
        provider_id,
        skill_id,
    )
    return session


def confirm_session(
    db: Session,
    session_id: int,
    acting_user_id: int,
    meeting_url: Optional[str] = None,
) -> SessionModel:
    """Provider accepts a pending request; online sessions need a meeting URL."""
    session = _load_session(db, session_id)

    if acting_user_id != session.provider_id:
        raise Forbidden("Only the provider can confirm this session")
    if session.status != STATUS_REQUESTED:
        raise InvalidState("Only requested sessions can be confirmed")

    effective_url = _clean_url(meeting_url) or session.meeting_url
    if session.location_type == LOCATION_ONLINE and not effective_url:
        raise ValidationError("A meeting URL is required to confirm an online session")

    return _apply_transition(db, session, STATUS_CONFIRMED, meeting_url=effective_url)


def deny_or_cancel_session(
    db: Session,
    session_id: int,
    acting_user_id: int,
    reason: Optional[str] = None,
) -> SessionModel:
    """
    Withdraw, reject or cancel a session.

    A requester withdrawing their own request and anyone leaving a
    confirmed session produce Cancelled; a provider rejecting a request
    produces Denied.
    """
    session = _load_session(db, session_id)

    if not session.is_participant(acting_user_id):
        raise Forbidden("Not authorized for this session")
    if session.status in TERMINAL_STATUSES:
        raise InvalidState(f"Session is already {session.status}")

    if session.status == STATUS_REQUESTED and acting_user_id == session.provider_id:
        target = STATUS_DENIED
    else:
        target = STATUS_CANCELLED

    cleaned_reason = (reason or "").strip() or settings.DEFAULT_CANCELLATION_REASON
    return _apply_transition(db, session, target, cancellation_reason=cleaned_reason)


def complete_session(db: Session, session_id: int, acting_user_id: int) -> SessionModel:
    session = _load_session(db, session_id)

    if not session.is_participant(acting_user_id):
        raise Forbidden("Not authorized to complete this session")
    if session.status != STATUS_CONFIRMED:
        raise InvalidState("Only confirmed sessions can be marked as completed")

    return _apply_transition(db, session, STATUS_COMPLETED)


# ======================
# RATING GATE
# ======================

def rate_session(
    db: Session,
    session_id: int,
    rater_id: int,
    ratee_id: int,
    like_status: bool,
    feedback_text: Optional[str] = None,
) -> Rating:
    """
    Record the single rating a completed session may carry.

    Raises:
        NotFound: Session does not exist
        Forbidden: Rater did not take part in the session
        SelfRating: Rater and ratee are the same user
        ValidationError: Ratee is not the other participant
        InvalidState: Session is not Completed
        DuplicateRating: The session already has a rating
    """
    session = _load_session(db, session_id)

    if not session.is_participant(rater_id):
        raise Forbidden("Only session participants can rate this session")
    if rater_id == ratee_id:
        raise SelfRating("You cannot rate yourself")
    if ratee_id != session.counterpart_of(rater_id):
        raise ValidationError("Ratee must be the other participant of the session")
    if session.status != STATUS_COMPLETED:
        raise InvalidState("Only completed sessions can be rated")
    if rating_crud.get_rating_by_session(db, session_id):
        raise DuplicateRating("This session has already been rated")

    try:
        rating = rating_crud.create_rating(
            db=db,
            session_id=session_id,
            rater_id=rater_id,
            ratee_id=ratee_id,
            like_status=like_status,
            feedback_text=feedback_text,
        )
        db.commit()
    except IntegrityError:
        # Lost the race against another rating for the same session
        db.rollback()
        logger.warning("Duplicate rating rejected for session %s", session_id)
        raise DuplicateRating("This session has already been rated")

    db.refresh(rating)
    logger.info(
        "Session %s rated by user %s (like=%s)", session_id, rater_id, like_status
    )
    return rating


def get_rating_summary(db: Session, user_id: int) -> Dict[str, int]:
    return rating_crud.get_rating_totals(db, user_id)


# ======================
# READS
# ======================

def get_session(db: Session, session_id: int, viewer_id: int, is_admin: bool = False) -> SessionModel:
    session = _load_session(db, session_id)
    if not is_admin and not session.is_participant(viewer_id):
        raise Forbidden("Not authorized to view this session")
    return session


def list_sessions_for_user(
    db: Session,
    user_id: int,
    status: Optional[str] = None,
) -> List[SessionModel]:
    return session_crud.get_sessions_for_user(db, user_id, status)
