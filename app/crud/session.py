# app/crud/session.py
"""
Session CRUD Operations
Row-level reads and the conditional status update used by every transition
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.session import Session as SessionModel


def create_session(db: Session, **fields: Any) -> SessionModel:
    session = SessionModel(**fields)
    db.add(session)
    db.flush()
    return session


def get_session(db: Session, session_id: int) -> Optional[SessionModel]:
    return db.query(SessionModel).filter(SessionModel.id == session_id).first()


def get_sessions_for_user(
    db: Session,
    user_id: int,
    status: Optional[str] = None,
) -> List[SessionModel]:
    query = db.query(SessionModel).filter(
        or_(
            SessionModel.provider_id == user_id,
            SessionModel.requester_id == user_id,
        )
    )
    if status:
        query = query.filter(SessionModel.status == status)
    return query.order_by(SessionModel.session_date_time.desc()).all()


def get_all_sessions(
    db: Session,
    status: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
) -> List[SessionModel]:
    query = db.query(SessionModel)
    if status:
        query = query.filter(SessionModel.status == status)
    return query.order_by(SessionModel.created_at.desc(), SessionModel.id.desc()).limit(limit).offset(offset).all()


def update_status_if(
    db: Session,
    session_id: int,
    expected_status: str,
    values: Dict[str, Any],
) -> bool:
    """
    Apply ``values`` only while the row still holds ``expected_status``.

    Returns False when no row matched, meaning another writer moved the
    session first (or it no longer exists).
    """
    updated = db.query(SessionModel).filter(
        SessionModel.id == session_id,
        SessionModel.status == expected_status,
    ).update(values, synchronize_session=False)
    return updated == 1
