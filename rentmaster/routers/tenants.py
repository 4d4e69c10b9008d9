"""Tenants router."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentmaster.core.database import get_db
from rentmaster.core.security import (
    AuthenticatedUser,
    client_ip,
    get_current_user,
    require_admin,
    require_manager,
)
from rentmaster.models.enums import TenantType
from rentmaster.models.lease import Lease
from rentmaster.models.payment import Payment
from rentmaster.models.property import Unit
from rentmaster.models.tenant import Tenant
from rentmaster.schemas.detail import TenantDetailResponse, TenantResponse
from rentmaster.schemas.tenant import TenantCreate, TenantUpdate
from rentmaster.services.audit import AuditService, snapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])


def _with_leases(with_payments: bool = False) -> list:
    options = [selectinload(Tenant.leases).selectinload(Lease.unit).selectinload(Unit.property)]
    if with_payments:
        options.append(
            selectinload(Tenant.leases).selectinload(Lease.payments).selectinload(Payment.payment_mode)
        )
    return options


async def _load_tenant(db: AsyncSession, tenant_id: UUID, with_payments: bool = False) -> Tenant:
    result = await db.execute(
        select(Tenant)
        .options(*_with_leases(with_payments))
        .where(Tenant.id == tenant_id)
        .execution_options(populate_existing=True)
    )
    tenant = result.scalar_one_or_none()
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    return tenant


@router.get("", response_model=List[TenantResponse])
async def list_tenants(
    search: Optional[str] = None,
    type: Optional[TenantType] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """List tenants newest first; `search` matches name, email or phone."""
    query = select(Tenant).options(*_with_leases())

    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Tenant.name).like(pattern),
                func.lower(Tenant.email).like(pattern),
                func.lower(Tenant.phone).like(pattern),
            )
        )
    if type:
        query = query.where(Tenant.type == type)

    result = await db.execute(
        query.order_by(Tenant.created_at.desc()).execution_options(populate_existing=True)
    )
    return [TenantResponse.model_validate(t) for t in result.scalars().all()]


@router.get("/{tenant_id}", response_model=TenantDetailResponse)
async def get_tenant(
    tenant_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get a tenant with leases, units and payments."""
    tenant = await _load_tenant(db, tenant_id, with_payments=True)
    return TenantDetailResponse.model_validate(tenant)


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    data: TenantCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Create a new tenant."""
    tenant = Tenant(
        name=data.name,
        type=data.type,
        email=data.email,
        phone=data.phone,
    )
    db.add(tenant)
    await db.flush()
    await AuditService(db).log_create("tenants", tenant, current_user, client_ip(request))
    await db.commit()

    logger.info("Tenant created: %s by %s", tenant.name, current_user.email)
    return TenantResponse.model_validate(await _load_tenant(db, tenant.id))


@router.put("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: UUID,
    data: TenantUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Update a tenant."""
    tenant = await db.get(Tenant, tenant_id)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

    old_data = snapshot(tenant)
    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("name", "type"):
            continue
        setattr(tenant, field, value)

    await db.flush()
    await AuditService(db).log_update("tenants", tenant, old_data, current_user, client_ip(request))
    await db.commit()

    logger.info("Tenant updated: %s by %s", tenant.name, current_user.email)
    return TenantResponse.model_validate(await _load_tenant(db, tenant_id))


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant(
    tenant_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Delete a tenant that has never held a lease."""
    tenant = await db.get(Tenant, tenant_id)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

    lease_count = await db.scalar(select(func.count(Lease.id)).where(Lease.tenant_id == tenant_id))
    if lease_count:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete tenant with existing leases",
        )

    old_data = snapshot(tenant)
    await db.delete(tenant)
    await AuditService(db).log_delete("tenants", old_data, tenant_id, current_user, client_ip(request))
    await db.commit()

    logger.info("Tenant deleted: %s by %s", old_data["name"], current_user.email)
