"""Payments router."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentmaster.core.database import get_db
from rentmaster.core.security import (
    AuthenticatedUser,
    client_ip,
    get_current_user,
    require_admin,
    require_manager,
)
from rentmaster.models.enums import PaymentStatus
from rentmaster.schemas.detail import PaymentResponse
from rentmaster.schemas.payment import (
    PaymentCreate,
    PaymentFilters,
    PaymentModeResponse,
    PaymentUpdate,
)
from rentmaster.services.payments import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    lease_id: Optional[UUID] = None,
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
    payment_mode_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """List payments newest first. Date filters are inclusive."""
    filters = PaymentFilters(
        lease_id=lease_id,
        status=payment_status,
        payment_mode_id=payment_mode_id,
        start_date=start_date,
        end_date=end_date,
    )
    payments = await PaymentService(db).list_payments(filters)
    return [PaymentResponse.model_validate(p) for p in payments]


@router.get("/modes", response_model=List[PaymentModeResponse])
async def list_payment_modes(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """List payment modes by display name."""
    modes = await PaymentService(db).list_modes()
    return [PaymentModeResponse.model_validate(m) for m in modes]


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get a payment with its lease."""
    payment = await PaymentService(db).get(payment_id)
    return PaymentResponse.model_validate(payment)


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    data: PaymentCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Record a payment against a lease."""
    payment = await PaymentService(db, current_user, client_ip(request)).create(data)
    return PaymentResponse.model_validate(payment)


@router.put("/{payment_id}", response_model=PaymentResponse)
async def update_payment(
    payment_id: UUID,
    data: PaymentUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Update a payment."""
    payment = await PaymentService(db, current_user, client_ip(request)).update(payment_id, data)
    return PaymentResponse.model_validate(payment)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Delete a payment without attached documents."""
    await PaymentService(db, current_user, client_ip(request)).delete(payment_id)
