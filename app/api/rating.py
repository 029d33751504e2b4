# app/api/rating.py
"""
Rating API Router

Endpoints:
- GET /api/user/ratings/{user_id} - Ratings received by a user
- GET /api/top-teachers - Users with the most likes
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.rating import RatingSummaryResponse
from app.schemas.skill import TopTeacher
from app.services import session_lifecycle, skill_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ratings"])


@router.get("/user/ratings/{user_id}", response_model=RatingSummaryResponse)
def get_rating_summary(user_id: int, db: Session = Depends(get_db)):
    try:
        totals = session_lifecycle.get_rating_summary(db, user_id)
    except SQLAlchemyError:
        logger.exception("Rating summary failed for user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    return RatingSummaryResponse(
        user_id=user_id,
        total_ratings_received=totals["total_ratings"],
        total_likes=totals["total_likes"],
    )


@router.get("/top-teachers", response_model=List[TopTeacher])
def get_top_teachers(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return skill_service.get_top_teachers(db, limit)
