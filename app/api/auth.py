import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app import schemas
from app.crud import user as user_crud
from app.database import get_db
from app.schemas.user import AVATAR_STYLES
from app.utils.security import authenticate_user, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: schemas.UserCreate, db: Session = Depends(get_db)):
    """Register a new student account"""
    if user_data.avatar_style and user_data.avatar_style not in AVATAR_STYLES:
        raise HTTPException(
            status_code=400,
            detail=f"avatar_style must be one of: {', '.join(AVATAR_STYLES)}"
        )

    if user_crud.get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        new_user = user_crud.create_user(db, user_data)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration failed for %s", user_data.email)
        raise HTTPException(status_code=500, detail="Internal server error")

    logger.info("Registered user %s", new_user.id)
    return {"message": "Registration successful", "user_id": new_user.id}

# ===== LOGIN ENDPOINT =====

@router.post("/login", response_model=schemas.Token)
def login(credentials: schemas.LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return access token"""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    access_token = create_access_token(user.id)

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": user.role
    }
