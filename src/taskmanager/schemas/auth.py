"""Pydantic schemas for registration, login and the profile endpoint.

Learn: UserRead never includes password_hash, so the credential can't
leak through a response even when a User row is returned directly.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=254, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6, max_length=72)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserRead(BaseModel):
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class ProfileRead(UserRead):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RegisterResponse(BaseModel):
    message: str = "User created successfully"
    user: UserRead


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserRead
