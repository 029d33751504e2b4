from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app import models, schemas
from app.crud import user as user_crud
from app.database import get_db
from app.schemas.user import AVATAR_STYLES
from app.utils.security import get_current_user

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=schemas.User)
def get_me(current_user: models.User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=schemas.User)
def update_me(
    profile_update: schemas.UserProfileUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if profile_update.avatar_style and profile_update.avatar_style not in AVATAR_STYLES:
        raise HTTPException(
            status_code=400,
            detail=f"avatar_style must be one of: {', '.join(AVATAR_STYLES)}"
        )
    return user_crud.update_user_profile(db, current_user, profile_update)


@router.get("/{user_id}", response_model=schemas.User)
def get_user_profile(
    user_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = user_crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
