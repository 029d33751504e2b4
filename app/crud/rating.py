# app/crud/rating.py
"""
Rating CRUD Operations
Inserts, lookups and aggregate queries over post-session ratings
"""

from typing import Dict, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.models.rating import Rating
from app.models.user import User


def create_rating(
    db: Session,
    session_id: int,
    rater_id: int,
    ratee_id: int,
    like_status: bool,
    feedback_text: Optional[str] = None
) -> Rating:
    rating = Rating(
        session_id=session_id,
        rater_id=rater_id,
        ratee_id=ratee_id,
        like_status=like_status,
        feedback_text=feedback_text
    )

    db.add(rating)
    db.flush()
    return rating


def get_rating_by_session(db: Session, session_id: int) -> Optional[Rating]:
    return db.query(Rating).filter(Rating.session_id == session_id).first()


def _likes_column():
    return func.coalesce(func.sum(case((Rating.like_status.is_(True), 1), else_=0)), 0)


def get_rating_totals(db: Session, user_id: int) -> Dict[str, int]:
    """
    Count ratings received by a user and how many of them are likes.

    Both values are 0 when the user has never been rated.
    """
    total, likes = db.query(
        func.count(Rating.id),
        _likes_column(),
    ).filter(Rating.ratee_id == user_id).one()

    return {
        "total_ratings": int(total or 0),
        "total_likes": int(likes or 0),
    }


def get_top_rated_users(db: Session, limit: int = 5):
    """Ratees ordered by likes received, then by number of ratings."""
    likes = _likes_column().label("total_likes")
    total = func.count(Rating.id).label("total_ratings")

    return (
        db.query(User, likes, total)
        .join(Rating, Rating.ratee_id == User.id)
        .group_by(User.id)
        .order_by(likes.desc(), total.desc(), User.id.asc())
        .limit(limit)
        .all()
    )
