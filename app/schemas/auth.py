from pydantic import BaseModel, EmailStr

# ======================
# TOKEN SCHEMAS
# ======================

class Token(BaseModel):
    access_token: str
    token_type: str
    # Runtime roles are "student" and "admin".
    role: str

class TokenData(BaseModel):
    # "sub" claim; ids travel as strings inside the JWT
    user_id: int


# ======================
# LOGIN
# ======================

class LoginRequest(BaseModel):
    email: EmailStr
    password: str
