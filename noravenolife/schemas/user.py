"""
User and authentication Pydantic schemas
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field

from noravenolife.core.config import settings

UserRole = Literal["attendee", "producer"]

class UserProfileOut(BaseModel):
    """User profile response"""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    role: UserRole = "attendee"
    created_at: datetime
    updated_at: datetime

class AuthForm(BaseModel):
    """Email/password sign-in or sign-up form"""
    email: EmailStr
    password: str = Field(..., min_length=settings.MIN_PASSWORD_LENGTH)

class FirebaseSessionRequest(BaseModel):
    """Firebase ID token obtained by the client SDK"""
    id_token: str

class RoleUpdate(BaseModel):
    """Role change request"""
    role: UserRole
