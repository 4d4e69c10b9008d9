"""Lease schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, Field, model_validator

from rentmaster.models.enums import BillingCycle, LeaseStatus
from rentmaster.schemas.base import BaseSchema, IDMixin, TimestampMixin, UTCDateTime
from rentmaster.schemas.property import UnitWithProperty
from rentmaster.schemas.tenant import TenantSummary


class LeaseCreate(BaseSchema):
    """Create a new lease on an available unit."""

    tenant_id: UUID
    local_id: UUID
    lease_reference: str = Field(..., min_length=2, max_length=100)

    start_date: UTCDateTime
    end_date: Optional[UTCDateTime] = None

    rent_amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    billing_cycle: BillingCycle

    @model_validator(mode="after")
    def validate_dates(self):
        """End date must not precede start date."""
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class LeaseUpdate(BaseSchema):
    """Update lease terms. Setting status TERMINATED frees the unit."""

    lease_reference: Optional[str] = Field(None, min_length=2, max_length=100)
    start_date: Optional[UTCDateTime] = None
    end_date: Optional[UTCDateTime] = None
    rent_amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    billing_cycle: Optional[BillingCycle] = None
    status: Optional[LeaseStatus] = None


class LeaseTerminate(BaseSchema):
    """Terminate a lease."""

    termination_date: Optional[UTCDateTime] = None


class LeaseSummary(BaseSchema, IDMixin, TimestampMixin):
    """Lease columns only."""

    tenant_id: UUID
    local_id: UUID = Field(validation_alias=AliasChoices("unit_id", "local_id"))
    lease_reference: str
    start_date: datetime
    end_date: Optional[datetime] = None
    rent_amount: float
    billing_cycle: BillingCycle
    status: LeaseStatus
    updated_at: Optional[datetime] = None


class LeaseWithTenant(LeaseSummary):
    """Lease with its tenant."""

    tenant: TenantSummary


class LeaseWithLocal(LeaseSummary):
    """Lease with its unit and property."""

    local: UnitWithProperty = Field(validation_alias=AliasChoices("unit", "local"))


class LeaseResponse(LeaseWithTenant, LeaseWithLocal):
    """Lease with tenant, unit and property."""
