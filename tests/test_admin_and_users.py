from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app import schemas
from app.api.admin import delete_user, list_sessions
from app.api.auth import register
from app.api.skill import add_skill, replace_my_skills
from app.api.users import update_me
from app.database import Base
from app.models.rating import Rating
from app.models.session import Session
from app.models.skill import Skill, UserSkill
from app.models.user import User
from app.services import session_lifecycle
from app.utils.security import (
    PasswordTooLong,
    authenticate_user,
    create_access_token,
    get_current_user,
    get_password_hash,
    require_admin,
)


@pytest.fixture
def db_session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _create_user(db, *, name: str, email: str, role: str = "student") -> User:
    user = User(
        name=name,
        email=email,
        password_hash="hash",
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _rated_session(db, provider: User, requester: User, skill: Skill) -> Session:
    session = session_lifecycle.request_session(
        db,
        requester_id=requester.id,
        provider_id=provider.id,
        skill_id=skill.id,
        session_date_time=datetime(2025, 5, 1, 15, 0),
        location_type="Online",
        meeting_url="https://meet.example/room",
    )
    session_lifecycle.confirm_session(db, session.id, provider.id)
    session_lifecycle.complete_session(db, session.id, provider.id)
    session_lifecycle.rate_session(db, session.id, requester.id, provider.id, True, "Thanks!")
    return session


def test_require_admin_rejects_students(db_session):
    student = _create_user(db_session, name="Student", email="student@university.edu")
    admin = _create_user(db_session, name="Admin", email="admin@university.edu", role="admin")

    with pytest.raises(HTTPException) as exc:
        require_admin(current_user=student)
    assert exc.value.status_code == 403
    assert require_admin(current_user=admin) is admin


def test_admin_delete_user_cascades_sessions_and_ratings(db_session):
    admin = _create_user(db_session, name="Admin", email="admin@university.edu", role="admin")
    provider = _create_user(db_session, name="Provider", email="provider@university.edu")
    requester = _create_user(db_session, name="Requester", email="requester@university.edu")
    skill = Skill(title="Biology")
    db_session.add(skill)
    db_session.commit()

    _rated_session(db_session, provider, requester, skill)
    db_session.add(UserSkill(user_id=provider.id, skill_id=skill.id, skill_type="offered"))
    db_session.commit()

    result = delete_user(provider.id, admin=admin, db=db_session)

    assert result["user_id"] == provider.id
    assert db_session.query(User).filter(User.id == provider.id).count() == 0
    assert db_session.query(Session).count() == 0
    assert db_session.query(Rating).count() == 0
    assert db_session.query(UserSkill).count() == 0
    # The other participant is untouched
    assert db_session.query(User).filter(User.id == requester.id).count() == 1


def test_admin_cannot_delete_self_or_missing_user(db_session):
    admin = _create_user(db_session, name="Admin", email="admin@university.edu", role="admin")

    with pytest.raises(HTTPException) as exc:
        delete_user(admin.id, admin=admin, db=db_session)
    assert exc.value.status_code == 400

    with pytest.raises(HTTPException) as exc:
        delete_user(9999, admin=admin, db=db_session)
    assert exc.value.status_code == 404


def test_admin_lists_sessions_by_status(db_session):
    admin = _create_user(db_session, name="Admin", email="admin@university.edu", role="admin")
    provider = _create_user(db_session, name="Provider", email="provider@university.edu")
    requester = _create_user(db_session, name="Requester", email="requester@university.edu")
    skill = Skill(title="History")
    db_session.add(skill)
    db_session.commit()

    completed = _rated_session(db_session, provider, requester, skill)
    session_lifecycle.request_session(
        db_session,
        requester_id=requester.id,
        provider_id=provider.id,
        skill_id=skill.id,
        session_date_time=datetime(2025, 7, 1, 15, 0),
        location_type="InPerson",
    )

    done = list_sessions(status_filter="Completed", limit=100, offset=0, admin=admin, db=db_session)
    assert [s.id for s in done] == [completed.id]
    assert len(list_sessions(status_filter=None, limit=100, offset=0, admin=admin, db=db_session)) == 2

    with pytest.raises(HTTPException) as exc:
        list_sessions(status_filter="Pending", limit=100, offset=0, admin=admin, db=db_session)
    assert exc.value.status_code == 400


def test_register_rejects_duplicate_email(db_session):
    payload = schemas.UserCreate(name="Jo", email="Jo@University.edu", password="secret123")

    result = register(payload, db=db_session)
    user = db_session.query(User).filter(User.id == result["user_id"]).one()
    assert user.email == "jo@university.edu"
    assert user.password_hash != "secret123"

    with pytest.raises(HTTPException) as exc:
        register(schemas.UserCreate(name="Jo 2", email="jo@university.edu", password="secret123"), db=db_session)
    assert exc.value.status_code == 400


def test_update_profile_fields(db_session):
    user = _create_user(db_session, name="Casey", email="casey@university.edu")

    updated = update_me(
        schemas.UserProfileUpdate(grade_level="12th", school_college="Piedmont High", avatar_style="micah"),
        current_user=user,
        db=db_session,
    )
    assert updated.grade_level == "12th"
    assert updated.avatar_style == "micah"
    assert updated.name == "Casey"

    with pytest.raises(HTTPException):
        update_me(schemas.UserProfileUpdate(avatar_style="pixel"), current_user=user, db=db_session)


def test_add_skill_dedupes_case_insensitively(db_session):
    user = _create_user(db_session, name="Casey", email="casey@university.edu")

    created = add_skill(schemas.SkillCreate(title="Guitar"), current_user=user, db=db_session)
    assert created.id is not None

    with pytest.raises(HTTPException) as exc:
        add_skill(schemas.SkillCreate(title="  guitar "), current_user=user, db=db_session)
    assert exc.value.status_code == 409


def test_replace_my_skills_unknown_skill_is_bad_request(db_session):
    user = _create_user(db_session, name="Casey", email="casey@university.edu")

    with pytest.raises(HTTPException) as exc:
        replace_my_skills(
            schemas.UserSkillsReplace(offered=[{"skill_id": 77}]),
            current_user=user,
            db=db_session,
        )
    assert exc.value.status_code == 400


def test_access_token_subject_resolves_current_user(db_session):
    user = _create_user(db_session, name="Casey", email="casey@university.edu")

    token = create_access_token(user.id)
    assert get_current_user(token=token, db=db_session) is user

    user.is_active = False
    db_session.commit()
    with pytest.raises(HTTPException) as exc:
        get_current_user(token=token, db=db_session)
    assert exc.value.status_code == 401


def test_expired_or_foreign_token_rejected(db_session):
    user = _create_user(db_session, name="Casey", email="casey@university.edu")

    expired = create_access_token(user.id, expires_delta=timedelta(minutes=-5))
    for token in (expired, create_access_token(9999), "not-a-jwt"):
        with pytest.raises(HTTPException) as exc:
            get_current_user(token=token, db=db_session)
        assert exc.value.status_code == 401


def test_passwords_longer_than_bcrypt_limit_refused(db_session):
    long_password = "é" * 40  # 80 bytes in UTF-8

    with pytest.raises(PasswordTooLong):
        get_password_hash(long_password)

    with pytest.raises(ValueError, match="72 bytes"):
        schemas.UserCreate(name="Jo", email="jo@university.edu", password=long_password)

    register(schemas.UserCreate(name="Jo", email="jo@university.edu", password="a" * 72), db=db_session)
    assert authenticate_user(db_session, "jo@university.edu", "a" * 72) is not None
    assert authenticate_user(db_session, "jo@university.edu", "a" * 73) is None
