from datetime import datetime, timedelta, UTC
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app import models
from app.config import settings
from app.database import get_db
from app.schemas.auth import TokenData
from app.schemas.user import PASSWORD_MAX_BYTES


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class PasswordTooLong(ValueError):
    pass


# ==========================
# PASSWORDS
# ==========================

def _password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= PASSWORD_MAX_BYTES


def get_password_hash(password: str) -> str:
    """Hash with bcrypt; anything bcrypt would silently cut short is refused."""
    if not _password_fits(password):
        raise PasswordTooLong(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # An oversized password can never have been stored
    if not _password_fits(plain_password):
        return False
    return pwd_context.verify(plain_password, hashed_password)


# ==========================
# ACCESS TOKENS
# ==========================

def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Bearer token whose subject is the user's id."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"sub": str(user_id), "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return TokenData(user_id=payload.get("sub"))
    except (JWTError, ValidationError):
        return None


# ==========================
# CURRENT USER
# ==========================

def authenticate_user(db: Session, email: str, password: str) -> Optional[models.User]:
    user = db.query(models.User).filter(
        models.User.email == email.strip().lower()
    ).first()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    token_data = decode_access_token(token)
    user = db.get(models.User, token_data.user_id) if token_data else None

    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(current_user: models.User = Depends(get_current_user)) -> models.User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access only",
        )
    return current_user
