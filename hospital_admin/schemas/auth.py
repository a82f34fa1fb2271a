from uuid import UUID

from pydantic import BaseModel, EmailStr

from hospital_admin.models.user import StaffRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SessionResponse(BaseModel):
    """The signed-in user as seen by the client."""

    user_id: UUID
    email: str
    full_name: str
    role: StaffRole
