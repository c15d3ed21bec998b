from datetime import datetime
from pydantic import BaseModel
from app.models.user import UserRole


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: str
    role: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TokenPayload(BaseModel):
    sub: str  # user id
    email: str
    exp: int
    type: str = "access"


class RegisterRequest(BaseModel):
    email: str
    password: str
    full_name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AccessCheckResponse(BaseModel):
    """Route-guard answer for the frontend: allowed, or where to redirect."""
    allowed: bool
    redirect_hint: str | None = None
    role: UserRole | None = None
