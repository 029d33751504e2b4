# app/api/admin.py
"""
Admin API Router
User moderation and session oversight for the admin panel.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app import models, schemas
from app.crud import session as session_crud
from app.crud import user as user_crud
from app.database import get_db
from app.models.session import SESSION_STATUSES
from app.schemas.session import SessionResponse
from app.utils.security import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=List[schemas.User])
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return user_crud.list_users(db, skip=skip, limit=limit)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Delete an account; its skill links, sessions and ratings go with it."""
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot delete their own account")

    if not user_crud.delete_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return {"message": "User deleted", "user_id": user_id}


@router.get("/sessions", response_model=List[SessionResponse])
def list_sessions(
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if status_filter and status_filter not in SESSION_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"status must be one of: {', '.join(SESSION_STATUSES)}"
        )
    return session_crud.get_all_sessions(db, status=status_filter, limit=limit, offset=offset)
