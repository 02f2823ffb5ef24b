"""
PodReview Backend — User Request/Response Schemas
==================================================

Email format is checked here (pydantic `EmailStr`); password strength and
required-field checks live in UserService.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

NAME_MAX_LENGTH = 255


class UserCreate(BaseModel):
    """Body of POST /api/user/ (signup)."""
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    model_config = {"extra": "ignore"}


class UserUpdate(BaseModel):
    """Body of PUT /api/user/. Email, password and role are not editable here."""
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)
    interests: Optional[List[str]] = None
    bookmarks: Optional[List[uuid.UUID]] = None

    model_config = {"extra": "ignore"}


class LoginRequest(BaseModel):
    """Body of POST /auth/local."""
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    """A user's own profile. Never carries the password hash."""
    id: uuid.UUID
    name: str
    email: str
    provider: str
    role: str
    interests: List[str] = Field(default_factory=list)
    bookmarks: List[uuid.UUID] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class Principal(BaseModel):
    """The identity a request acts as, resolved from its bearer token."""
    id: uuid.UUID
    name: str
    role: str = "user"

    model_config = {"frozen": True}
