"""Auth and user schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from rentmaster.models.enums import UserRole
from rentmaster.schemas.base import BaseSchema, IDMixin


class UserRegister(BaseSchema):
    """Register a back-office user (admin only)."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=2, max_length=255)
    role: UserRole = UserRole.MANAGER


class UserResponse(BaseSchema, IDMixin):
    """Back-office user."""

    email: str
    full_name: str
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None


class UserBrief(BaseSchema):
    """Actor shown next to audit entries and documents."""

    id: Optional[UUID] = None
    full_name: Optional[str] = None
    email: Optional[str] = None


class CurrentUserResponse(BaseSchema):
    """Current authenticated user info."""

    uid: str
    db_user_id: UUID
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: UserRole
