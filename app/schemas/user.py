from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

AVATAR_STYLES = ("bottts", "avataaars", "micah", "identicon")

# bcrypt ignores everything past this many bytes
PASSWORD_MAX_BYTES = 72


# ======================
# USER AUTHENTICATION SCHEMAS
# ======================

class UserBase(BaseModel):
    email: str
    # End-user accounts are "student"; "admin" is reserved.
    role: str = "student"


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    date_of_birth: Optional[date] = None
    grade_level: Optional[str] = Field(None, max_length=50)
    school_college: Optional[str] = Field(None, max_length=150)
    avatar_style: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
        return value


class User(UserBase):
    id: int
    name: str
    is_active: bool
    date_of_birth: Optional[date] = None
    grade_level: Optional[str] = None
    school_college: Optional[str] = None
    avatar_style: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ======================
# PROFILE SCHEMAS
# ======================

class UserProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    grade_level: Optional[str] = Field(None, max_length=50)
    school_college: Optional[str] = Field(None, max_length=150)
    avatar_style: Optional[str] = None

    model_config = ConfigDict(extra="forbid")
