"""
Populate the database with demo users, skills, and a rated session history.

Usage:
  python -m app.scripts.seed

Optional environment:
  SEED_USERS=20                 # Number of fake accounts to create
  SEED_SESSIONS=15              # Number of completed sessions to generate
  SEED_PASSWORD=password123     # Shared password for every fake account
"""

import logging
import os
import random
import sys
from datetime import date, datetime, timedelta, UTC
from typing import List

from sqlalchemy.orm import Session

from app import models
from app.database import Base, SessionLocal, engine
from app.models.session import LOCATION_ONLINE
from app.models.skill import SKILL_TYPE_OFFERED, SKILL_TYPE_SOUGHT
from app.services import session_lifecycle
from app.utils.security import get_password_hash

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "James", "Mary", "Robert", "Patricia", "John", "Jennifer", "Michael",
    "Linda", "David", "Elizabeth", "William", "Barbara", "Richard", "Susan",
    "Joseph", "Jessica", "Thomas", "Sarah", "Charles", "Karen", "Daniel",
    "Lisa", "Matthew",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller",
    "Davis", "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez",
    "Wilson", "Anderson", "Thomas", "Taylor", "Moore", "Jackson", "Martin",
    "Lee", "Perez",
]

SCHOOLS = [
    "Francis Tuttle Tech",
    "Piedmont High",
    "Oklahoma City Univ",
    "Tulsa Community College",
    "Norman North High",
    "Edmond Santa Fe",
]

SKILL_LIST = [
    "Algebra", "Calculus", "Python Programming", "Creative Writing",
    "Public Speaking", "Guitar", "Piano", "Spanish", "French", "Biology",
    "Chemistry", "History", "Graphic Design", "Video Editing",
]

FEEDBACK_COMMENTS = [
    "Great teacher! Very patient.",
    "Explained the concepts clearly.",
    "A bit fast, but knows their stuff.",
    "Helped me ace my test!",
    "Would definitely recommend.",
    "Super friendly and helpful.",
    "Thanks for the help!",
    "Good session, solved my problem.",
]

AVATAR_STYLES = ["bottts", "avataaars", "micah", "identicon"]


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    value = int(raw)
    if value < 0:
        raise ValueError(f"{key} must be >= 0")
    return value


def _random_date(start: date, end: date) -> date:
    return start + timedelta(days=random.randint(0, (end - start).days))


def seed_skills(db: Session) -> List[models.Skill]:
    for title in SKILL_LIST:
        exists = db.query(models.Skill).filter(models.Skill.title == title).first()
        if not exists:
            db.add(models.Skill(title=title, category="General"))
    db.commit()
    return db.query(models.Skill).all()


def seed_users(db: Session, count: int, password: str) -> List[models.User]:
    password_hash = get_password_hash(password)
    created = []
    emails = set()

    for _ in range(count):
        first = random.choice(FIRST_NAMES)
        last = random.choice(LAST_NAMES)
        email = f"{first.lower()}.{last.lower()}{random.randint(0, 999)}@example.com"
        if email in emails or db.query(models.User.id).filter(models.User.email == email).first():
            continue
        emails.add(email)

        user = models.User(
            name=f"{first} {last}",
            email=email,
            password_hash=password_hash,
            role="student",
            is_active=True,
            date_of_birth=_random_date(date(2000, 1, 1), date(2008, 1, 1)),
            grade_level="12th" if random.random() > 0.5 else "College",
            school_college=random.choice(SCHOOLS) if random.random() > 0.3 else None,
            avatar_style=random.choice(AVATAR_STYLES),
        )
        db.add(user)
        created.append(user)
    db.commit()

    if not created:
        logger.warning("No new users created; falling back to existing accounts")
        created = db.query(models.User).filter(models.User.role != "admin").limit(count).all()
    return created


def seed_user_skills(db: Session, users: List[models.User], skills: List[models.Skill]) -> None:
    for user in users:
        for skill_type in (SKILL_TYPE_OFFERED, SKILL_TYPE_SOUGHT):
            picks = random.sample(skills, k=min(len(skills), random.randint(1, 3)))
            for skill in picks:
                exists = db.query(models.UserSkill.id).filter(
                    models.UserSkill.user_id == user.id,
                    models.UserSkill.skill_id == skill.id,
                    models.UserSkill.skill_type == skill_type,
                ).first()
                if exists:
                    continue
                db.add(models.UserSkill(
                    user_id=user.id,
                    skill_id=skill.id,
                    skill_type=skill_type,
                    is_virtual_only=random.random() > 0.5,
                    is_inperson_only=random.random() > 0.5,
                ))
    db.commit()


def seed_history(
    db: Session,
    users: List[models.User],
    skills: List[models.Skill],
    count: int,
) -> int:
    """Drive completed, rated sessions through the lifecycle service."""
    if len(users) < 2:
        return 0

    start = datetime(2025, 1, 1)
    span_seconds = int((datetime.now(UTC).replace(tzinfo=None) - start).total_seconds())
    created = 0

    for _ in range(count):
        provider, requester = random.sample(users, 2)
        skill = random.choice(skills)
        when = start + timedelta(seconds=random.randint(0, max(span_seconds, 0)))
        meeting_url = f"https://meet.example.com/{random.randint(100000, 999999)}"

        session = session_lifecycle.request_session(
            db,
            requester_id=requester.id,
            provider_id=provider.id,
            skill_id=skill.id,
            session_date_time=when,
            location_type=LOCATION_ONLINE,
        )
        session_lifecycle.confirm_session(db, session.id, provider.id, meeting_url)
        session_lifecycle.complete_session(db, session.id, provider.id)

        liked = random.random() > 0.2
        session_lifecycle.rate_session(
            db,
            session_id=session.id,
            rater_id=requester.id,
            ratee_id=provider.id,
            like_status=liked,
            feedback_text=random.choice(FEEDBACK_COMMENTS) if liked else "Provider was late.",
        )
        created += 1
    return created


def seed_database() -> int:
    try:
        user_count = _env_int("SEED_USERS", 20)
        session_count = _env_int("SEED_SESSIONS", 15)
        password = os.getenv("SEED_PASSWORD", "password123")

        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            skills = seed_skills(db)
            users = seed_users(db, user_count, password)
            seed_user_skills(db, users, skills)
            sessions = seed_history(db, users, skills, session_count)

            print(f"Seed complete: {len(users)} users, {len(skills)} skills, {sessions} rated sessions")
            print(f"All new users have password: '{password}'")
            return 0
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
    except Exception as exc:
        print(f"Seed failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(seed_database())
