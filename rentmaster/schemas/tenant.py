"""Tenant schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from rentmaster.models.enums import TenantType
from rentmaster.schemas.base import BaseSchema, IDMixin, TimestampMixin


class TenantCreate(BaseSchema):
    """Create a new tenant."""

    name: str = Field(..., min_length=2, max_length=255)
    type: TenantType
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)


class TenantUpdate(BaseSchema):
    """Update tenant."""

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    type: Optional[TenantType] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)


class TenantSummary(BaseSchema, IDMixin, TimestampMixin):
    """Tenant without leases."""

    name: str
    type: TenantType
    email: Optional[str] = None
    phone: Optional[str] = None
