"""Property and Unit schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from rentmaster.models.enums import UnitStatus
from rentmaster.schemas.base import BaseSchema, IDMixin, TimestampMixin

MANUAL_UNIT_STATUSES = (UnitStatus.AVAILABLE, UnitStatus.MAINTENANCE)


def _manual_status(value: Optional[UnitStatus]) -> Optional[UnitStatus]:
    """OCCUPIED is only ever set by lease creation."""
    if value is not None and value not in MANUAL_UNIT_STATUSES:
        raise ValueError("status must be AVAILABLE or MAINTENANCE; OCCUPIED is set by leases")
    return value


class PropertyCreate(BaseSchema):
    """Create a new property."""

    name: str = Field(..., min_length=2, max_length=255)
    location: str = Field(..., min_length=2, max_length=255)
    description: str = Field(default="", max_length=5000)


class PropertyUpdate(BaseSchema):
    """Update property."""

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    location: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)


class PropertySummary(BaseSchema, IDMixin, TimestampMixin):
    """Property without its units."""

    name: str
    location: str
    description: str


class UnitCreate(BaseSchema):
    """Create a new unit (local) under a property."""

    reference_code: str = Field(..., min_length=1, max_length=100)
    floor: Optional[str] = Field(None, max_length=50)
    unit_type: Optional[str] = Field(None, max_length=100)
    size_m2: Optional[float] = Field(None, gt=0)
    status: UnitStatus = UnitStatus.AVAILABLE

    check_status = field_validator("status")(_manual_status)


class UnitUpdate(BaseSchema):
    """Update unit."""

    reference_code: Optional[str] = Field(None, min_length=1, max_length=100)
    floor: Optional[str] = Field(None, max_length=50)
    unit_type: Optional[str] = Field(None, max_length=100)
    size_m2: Optional[float] = Field(None, gt=0)
    status: Optional[UnitStatus] = None

    check_status = field_validator("status")(_manual_status)


class UnitResponse(BaseSchema, IDMixin, TimestampMixin):
    """Unit response."""

    property_id: UUID
    reference_code: str
    floor: Optional[str] = None
    unit_type: Optional[str] = None
    size_m2: Optional[float] = None
    status: UnitStatus


class UnitWithProperty(UnitResponse):
    """Unit with its parent property."""

    property: PropertySummary
