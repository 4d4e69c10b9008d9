"""Payment and payment mode schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from rentmaster.models.enums import PaymentStatus
from rentmaster.schemas.base import BaseSchema, IDMixin, UTCDateTime


class PaymentModeResponse(BaseSchema, IDMixin):
    """Payment mode."""

    code: str
    display_name: str
    requires_proof: bool


class PaymentCreate(BaseSchema):
    """Record a payment against a lease."""

    lease_id: UUID
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    payment_mode_id: UUID
    reference: Optional[str] = Field(None, max_length=255)
    status: PaymentStatus = PaymentStatus.COMPLETED
    # Defaults to now; a PENDING payment dated in the past counts as overdue
    paid_at: Optional[UTCDateTime] = None


class PaymentUpdate(BaseSchema):
    """Update a payment."""

    amount: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    payment_mode_id: Optional[UUID] = None
    reference: Optional[str] = Field(None, max_length=255)
    status: Optional[PaymentStatus] = None
    paid_at: Optional[UTCDateTime] = None


class PaymentFilters(BaseSchema):
    """Query filters for listing payments (dates inclusive)."""

    lease_id: Optional[UUID] = None
    status: Optional[PaymentStatus] = None
    payment_mode_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class PaymentSummary(BaseSchema, IDMixin):
    """Payment with its mode, without the lease."""

    lease_id: UUID
    amount: float
    paid_at: datetime
    payment_mode_id: UUID
    reference: Optional[str] = None
    status: PaymentStatus
    payment_mode: PaymentModeResponse
