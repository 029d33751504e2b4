# tests/test_session_lifecycle.py
"""
Session lifecycle and rating gate tests
request -> confirm/deny -> complete -> rate, against an in-memory database
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.database import Base
from app.models.rating import Rating
from app.models.session import Session
from app.models.skill import Skill
from app.models.user import User
from app.services import session_lifecycle
from app.services.session_lifecycle import (
    Conflict,
    DuplicateRating,
    Forbidden,
    InvalidParticipants,
    InvalidState,
    MissingFields,
    NotFound,
    SelfRating,
    ValidationError,
)

PROVIDER_ID = 10
REQUESTER_ID = 20
OUTSIDER_ID = 30
SKILL_ID = 3
MEET_URL = "https://meet.example/abc"


# ======================
# TEST DATABASE SETUP
# ======================

def _populate(db):
    db.add_all([
        User(id=PROVIDER_ID, name="Pat Provider", email="provider@university.edu", password_hash="hash"),
        User(id=REQUESTER_ID, name="Riley Requester", email="requester@university.edu", password_hash="hash"),
        User(id=OUTSIDER_ID, name="Olive Outsider", email="outsider@university.edu", password_hash="hash"),
        User(id=5, name="Sam Solo", email="solo@university.edu", password_hash="hash"),
        Skill(id=SKILL_ID, title="Calculus"),
    ])
    db.commit()


@pytest.fixture
def db_session():
    """Create test database session"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    db = SessionLocal()
    _populate(db)

    yield db

    db.close()


def _request(db, location_type="Online", meeting_url=None, **overrides):
    fields = dict(
        requester_id=REQUESTER_ID,
        provider_id=PROVIDER_ID,
        skill_id=SKILL_ID,
        session_date_time=datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc),
        location_type=location_type,
        meeting_url=meeting_url,
    )
    fields.update(overrides)
    return session_lifecycle.request_session(db, **fields)


def _confirmed(db):
    session = _request(db)
    return session_lifecycle.confirm_session(db, session.id, PROVIDER_ID, MEET_URL)


def _completed(db):
    session = _confirmed(db)
    return session_lifecycle.complete_session(db, session.id, PROVIDER_ID)


# ======================
# TEST 1: FULL SCENARIO
# ======================

def test_happy_path_request_confirm_complete_rate(db_session):
    session = _request(db_session)
    assert session.status == "Requested"
    assert session.meeting_url is None

    session = session_lifecycle.confirm_session(db_session, session.id, PROVIDER_ID, MEET_URL)
    assert session.status == "Confirmed"
    assert session.meeting_url == MEET_URL

    session = session_lifecycle.complete_session(db_session, session.id, PROVIDER_ID)
    assert session.status == "Completed"

    rating = session_lifecycle.rate_session(
        db_session,
        session_id=session.id,
        rater_id=REQUESTER_ID,
        ratee_id=PROVIDER_ID,
        like_status=True,
    )
    assert rating.id is not None
    assert rating.feedback_text is None

    summary = session_lifecycle.get_rating_summary(db_session, PROVIDER_ID)
    assert summary == {"total_ratings": 1, "total_likes": 1}


def test_request_round_trip_preserves_fields(db_session):
    created = _request(db_session, location_type="InPerson")
    db_session.expire_all()

    fetched = db_session.query(Session).filter(Session.id == created.id).one()
    assert fetched.requester_id == REQUESTER_ID
    assert fetched.provider_id == PROVIDER_ID
    assert fetched.skill_id == SKILL_ID
    # Stored as naive UTC
    assert fetched.session_date_time == datetime(2025, 6, 1, 10, 0)
    assert fetched.location_type == "InPerson"
    assert fetched.status == "Requested"
    assert fetched.meeting_url is None
    assert fetched.cancellation_reason is None


def test_request_converts_offset_datetimes_to_utc(db_session):
    local = datetime(2025, 6, 1, 12, 30, tzinfo=timezone(timedelta(hours=2)))
    session = _request(db_session, session_date_time=local)
    assert session.session_date_time == datetime(2025, 6, 1, 10, 30)


# ======================
# TEST 2: REQUEST VALIDATION
# ======================

def test_request_with_yourself_rejected(db_session):
    with pytest.raises(InvalidParticipants):
        _request(db_session, requester_id=5, provider_id=5)

    assert db_session.query(Session).count() == 0


def test_self_request_is_a_validation_error(db_session):
    with pytest.raises(ValidationError, match="yourself"):
        _request(db_session, requester_id=5, provider_id=5)


def test_request_missing_fields(db_session):
    with pytest.raises(MissingFields, match="skill_id"):
        _request(db_session, skill_id=None)


def test_request_unknown_location_type(db_session):
    with pytest.raises(ValidationError, match="location_type"):
        _request(db_session, location_type="Moon")


def test_request_unknown_provider_or_skill(db_session):
    with pytest.raises(NotFound, match="Provider"):
        _request(db_session, provider_id=999)
    with pytest.raises(NotFound, match="Skill"):
        _request(db_session, skill_id=999)


def test_request_oversized_meeting_url(db_session):
    with pytest.raises(ValidationError, match="255"):
        _request(db_session, meeting_url="https://x.example/" + "a" * 300)


# ======================
# TEST 3: CONFIRM
# ======================

def test_confirm_by_requester_forbidden(db_session):
    session = _request(db_session)

    with pytest.raises(Forbidden):
        session_lifecycle.confirm_session(db_session, session.id, REQUESTER_ID, MEET_URL)

    db_session.refresh(session)
    assert session.status == "Requested"


def test_confirm_online_requires_meeting_url(db_session):
    session = _request(db_session)

    with pytest.raises(ValidationError, match="meeting URL"):
        session_lifecycle.confirm_session(db_session, session.id, PROVIDER_ID, "   ")


def test_confirm_oversized_meeting_url(db_session):
    session = _request(db_session)

    with pytest.raises(ValidationError, match="255"):
        session_lifecycle.confirm_session(db_session, session.id, PROVIDER_ID, "https://x/" + "a" * 300)

    db_session.refresh(session)
    assert session.status == "Requested"
    assert session.meeting_url is None


def test_confirm_online_reuses_url_given_at_request(db_session):
    session = _request(db_session, meeting_url=MEET_URL)

    confirmed = session_lifecycle.confirm_session(db_session, session.id, PROVIDER_ID)
    assert confirmed.status == "Confirmed"
    assert confirmed.meeting_url == MEET_URL


def test_confirm_in_person_without_url(db_session):
    session = _request(db_session, location_type="InPerson")

    confirmed = session_lifecycle.confirm_session(db_session, session.id, PROVIDER_ID)
    assert confirmed.status == "Confirmed"
    assert confirmed.meeting_url is None


def test_confirm_twice_is_invalid_state(db_session):
    session = _confirmed(db_session)

    with pytest.raises(InvalidState):
        session_lifecycle.confirm_session(db_session, session.id, PROVIDER_ID, MEET_URL)


def test_confirm_missing_session(db_session):
    with pytest.raises(NotFound):
        session_lifecycle.confirm_session(db_session, 12345, PROVIDER_ID, MEET_URL)


# ======================
# TEST 4: DENY / CANCEL
# ======================

def test_requester_withdrawing_request_cancels(db_session):
    session = _request(db_session)

    result = session_lifecycle.deny_or_cancel_session(db_session, session.id, REQUESTER_ID, "Found another tutor")
    assert result.status == "Cancelled"
    assert result.cancellation_reason == "Found another tutor"


def test_provider_rejecting_request_denies(db_session):
    session = _request(db_session)

    result = session_lifecycle.deny_or_cancel_session(db_session, session.id, PROVIDER_ID)
    assert result.status == "Denied"
    assert result.cancellation_reason == "No reason provided"


@pytest.mark.parametrize("actor", [PROVIDER_ID, REQUESTER_ID])
def test_either_party_cancels_confirmed_session(db_session, actor):
    session = _confirmed(db_session)

    result = session_lifecycle.deny_or_cancel_session(db_session, session.id, actor, "Sick")
    assert result.status == "Cancelled"


def test_outsider_cannot_deny(db_session):
    session = _request(db_session)

    with pytest.raises(Forbidden):
        session_lifecycle.deny_or_cancel_session(db_session, session.id, OUTSIDER_ID)


def test_terminal_sessions_cannot_be_denied(db_session):
    denied = _request(db_session)
    session_lifecycle.deny_or_cancel_session(db_session, denied.id, PROVIDER_ID)
    completed = _completed(db_session)

    for session_id in (denied.id, completed.id):
        with pytest.raises(InvalidState):
            session_lifecycle.deny_or_cancel_session(db_session, session_id, REQUESTER_ID)


# ======================
# TEST 5: COMPLETE
# ======================

def test_completing_requested_session_rejected(db_session):
    session = _request(db_session)

    with pytest.raises(InvalidState):
        session_lifecycle.complete_session(db_session, session.id, PROVIDER_ID)


def test_requester_can_complete(db_session):
    session = _confirmed(db_session)

    result = session_lifecycle.complete_session(db_session, session.id, REQUESTER_ID)
    assert result.status == "Completed"


def test_outsider_cannot_complete(db_session):
    session = _confirmed(db_session)

    with pytest.raises(Forbidden):
        session_lifecycle.complete_session(db_session, session.id, OUTSIDER_ID)


def test_no_transition_leaves_terminal_states(db_session):
    completed = _completed(db_session)
    cancelled = _request(db_session)
    session_lifecycle.deny_or_cancel_session(db_session, cancelled.id, REQUESTER_ID)

    for session_id in (completed.id, cancelled.id):
        with pytest.raises(InvalidState):
            session_lifecycle.confirm_session(db_session, session_id, PROVIDER_ID, MEET_URL)
        with pytest.raises(InvalidState):
            session_lifecycle.complete_session(db_session, session_id, PROVIDER_ID)

    assert session_lifecycle.can_transition("Completed", "Cancelled") is False
    assert session_lifecycle.can_transition("Denied", "Confirmed") is False
    assert session_lifecycle.can_transition("Requested", "Completed") is False
    assert session_lifecycle.can_transition("Confirmed", "Completed") is True


# ======================
# TEST 6: RATING GATE
# ======================

def test_rating_requires_completed_session(db_session):
    session = _confirmed(db_session)

    with pytest.raises(InvalidState):
        session_lifecycle.rate_session(db_session, session.id, REQUESTER_ID, PROVIDER_ID, True)

    assert db_session.query(Rating).count() == 0


def test_second_rating_is_conflict(db_session):
    session = _completed(db_session)
    session_lifecycle.rate_session(db_session, session.id, REQUESTER_ID, PROVIDER_ID, True, "Great!")

    with pytest.raises(Conflict):
        session_lifecycle.rate_session(db_session, session.id, PROVIDER_ID, REQUESTER_ID, False)

    assert db_session.query(Rating).count() == 1


def test_unique_constraint_surfaces_as_duplicate_rating(db_session, monkeypatch):
    """A rating inserted between the existence check and our insert."""
    session = _completed(db_session)
    db_session.add(Rating(session_id=session.id, rater_id=PROVIDER_ID, ratee_id=REQUESTER_ID, like_status=True))
    db_session.commit()

    from app.crud import rating as rating_crud
    monkeypatch.setattr(rating_crud, "get_rating_by_session", lambda db, session_id: None)

    with pytest.raises(DuplicateRating):
        session_lifecycle.rate_session(db_session, session.id, REQUESTER_ID, PROVIDER_ID, False)


def test_self_rating_rejected(db_session):
    session = _completed(db_session)

    with pytest.raises(SelfRating):
        session_lifecycle.rate_session(db_session, session.id, REQUESTER_ID, REQUESTER_ID, True)


def test_outsider_cannot_rate(db_session):
    session = _completed(db_session)

    with pytest.raises(Forbidden):
        session_lifecycle.rate_session(db_session, session.id, OUTSIDER_ID, PROVIDER_ID, True)


def test_ratee_must_be_counterpart(db_session):
    session = _completed(db_session)

    with pytest.raises(ValidationError, match="other participant"):
        session_lifecycle.rate_session(db_session, session.id, REQUESTER_ID, OUTSIDER_ID, True)


def test_rating_missing_session(db_session):
    with pytest.raises(NotFound):
        session_lifecycle.rate_session(db_session, 999, REQUESTER_ID, PROVIDER_ID, True)


def test_rating_summary_zero_when_unrated(db_session):
    assert session_lifecycle.get_rating_summary(db_session, OUTSIDER_ID) == {
        "total_ratings": 0,
        "total_likes": 0,
    }


def test_rating_summary_counts_likes_and_dislikes(db_session):
    for like in (True, False, True):
        session = _completed(db_session)
        session_lifecycle.rate_session(db_session, session.id, REQUESTER_ID, PROVIDER_ID, like)

    assert session_lifecycle.get_rating_summary(db_session, PROVIDER_ID) == {
        "total_ratings": 3,
        "total_likes": 2,
    }
    # Ratings given are not ratings received
    assert session_lifecycle.get_rating_summary(db_session, REQUESTER_ID)["total_ratings"] == 0


# ======================
# TEST 7: CONCURRENT TRANSITIONS
# ======================

def test_losing_concurrent_writer_gets_invalid_state(tmp_path):
    """Provider confirms while the requester's cancel already landed."""
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    provider_db = SessionLocal()
    requester_db = SessionLocal()

    try:
        _populate(provider_db)
        session = _request(provider_db)
        # provider_db now holds a loaded, stale copy of the row

        session_lifecycle.deny_or_cancel_session(requester_db, session.id, REQUESTER_ID)

        assert provider_db.get(Session, session.id).status == "Requested"
        with pytest.raises(InvalidState, match="Cancelled"):
            session_lifecycle.confirm_session(provider_db, session.id, PROVIDER_ID, MEET_URL)

        provider_db.expire_all()
        assert provider_db.get(Session, session.id).status == "Cancelled"
    finally:
        provider_db.close()
        requester_db.close()
