"""Properties and Units (locals) router."""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import func, select, update
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
from rentmaster.models.enums import LeaseStatus, UnitStatus
from rentmaster.models.lease import Lease
from rentmaster.models.property import Property, Unit
from rentmaster.schemas.detail import PropertyResponse
from rentmaster.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    UnitCreate,
    UnitResponse,
    UnitUpdate,
)
from rentmaster.services.audit import AuditService, snapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["properties"])


def _with_units(active_only: bool):
    leases = Unit.leases.and_(Lease.status == LeaseStatus.ACTIVE) if active_only else Unit.leases
    return selectinload(Property.units).selectinload(leases).selectinload(Lease.tenant)


async def _load_property(db: AsyncSession, property_id: UUID, active_only: bool = False) -> Property:
    result = await db.execute(
        select(Property)
        .options(_with_units(active_only))
        .where(Property.id == property_id)
        .execution_options(populate_existing=True)
    )
    prop = result.scalar_one_or_none()
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return prop


async def _reference_taken(db: AsyncSession, reference_code: str) -> bool:
    result = await db.execute(select(Unit.id).where(Unit.reference_code == reference_code))
    return result.first() is not None


async def _has_active_lease(db: AsyncSession, unit_id: UUID) -> bool:
    result = await db.execute(
        select(Lease.id).where(Lease.unit_id == unit_id, Lease.status == LeaseStatus.ACTIVE)
    )
    return result.first() is not None


@router.get("", response_model=List[PropertyResponse])
async def list_properties(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """List properties newest first, with units and their active leases."""
    result = await db.execute(
        select(Property)
        .options(_with_units(active_only=True))
        .order_by(Property.created_at.desc())
        .execution_options(populate_existing=True)
    )
    return [PropertyResponse.model_validate(p) for p in result.scalars().all()]


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get a property with units and all of their leases."""
    prop = await _load_property(db, property_id)
    return PropertyResponse.model_validate(prop)


@router.post("", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Create a new property."""
    prop = Property(
        name=data.name,
        location=data.location,
        description=data.description,
    )
    db.add(prop)
    await db.flush()
    await AuditService(db).log_create("properties", prop, current_user, client_ip(request))
    await db.commit()

    logger.info("Property created: %s by %s", prop.name, current_user.email)
    return PropertyResponse.model_validate(await _load_property(db, prop.id))


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Update a property."""
    prop = await db.get(Property, property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

    old_data = snapshot(prop)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(prop, field, value)

    await db.flush()
    await AuditService(db).log_update("properties", prop, old_data, current_user, client_ip(request))
    await db.commit()

    logger.info("Property updated: %s by %s", prop.name, current_user.email)
    return PropertyResponse.model_validate(await _load_property(db, property_id))


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Delete a property that has no units."""
    prop = await db.get(Property, property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

    unit_count = await db.scalar(
        select(func.count(Unit.id)).where(Unit.property_id == property_id)
    )
    if unit_count:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete property with existing locals",
        )

    old_data = snapshot(prop)
    await db.delete(prop)
    await AuditService(db).log_delete("properties", old_data, property_id, current_user, client_ip(request))
    await db.commit()

    logger.info("Property deleted: %s by %s", old_data["name"], current_user.email)


# --- Units (locals) ---

@router.post("/{property_id}/locals", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
async def create_local(
    property_id: UUID,
    data: UnitCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Create a unit within a property."""
    if not await db.get(Property, property_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

    if await _reference_taken(db, data.reference_code):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Local reference code already exists",
        )

    unit = Unit(
        property_id=property_id,
        reference_code=data.reference_code,
        floor=data.floor,
        unit_type=data.unit_type,
        size_m2=data.size_m2,
        status=data.status,
    )
    db.add(unit)
    await db.flush()
    await AuditService(db).log_create("units", unit, current_user, client_ip(request))
    await db.commit()

    logger.info("Local created: %s by %s", unit.reference_code, current_user.email)
    return UnitResponse.model_validate(unit)


@router.put("/locals/{local_id}", response_model=UnitResponse)
async def update_local(
    local_id: UUID,
    data: UnitUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_manager),
):
    """Update a unit.

    Status may only be set to AVAILABLE or MAINTENANCE, and never while the
    unit carries an active lease; lease operations own OCCUPIED.
    """
    result = await db.execute(select(Unit).where(Unit.id == local_id).with_for_update())
    unit = result.scalar_one_or_none()
    if not unit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Local not found")

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    new_status = update_data.pop("status", None)

    new_reference = update_data.get("reference_code")
    if new_reference and new_reference != unit.reference_code:
        if await _reference_taken(db, new_reference):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Local reference code already exists",
            )

    leased = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Cannot change status of a leased local",
    )
    if new_status and await _has_active_lease(db, unit.id):
        raise leased

    old_data = snapshot(unit)
    for field, value in update_data.items():
        setattr(unit, field, value)

    if new_status:
        # A lease committed since the check above leaves the unit OCCUPIED
        changed = await db.execute(
            update(Unit)
            .where(Unit.id == unit.id, Unit.status != UnitStatus.OCCUPIED)
            .values(status=new_status)
        )
        if changed.rowcount != 1:
            await db.rollback()
            raise leased

    await db.flush()
    await AuditService(db).log_update("units", unit, old_data, current_user, client_ip(request))
    await db.commit()

    logger.info("Local updated: %s by %s", unit.reference_code, current_user.email)
    return UnitResponse.model_validate(unit)


@router.delete("/locals/{local_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_local(
    local_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Delete a unit that has never been leased."""
    unit = await db.get(Unit, local_id)
    if not unit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Local not found")

    lease_count = await db.scalar(select(func.count(Lease.id)).where(Lease.unit_id == local_id))
    if lease_count:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete local with existing leases",
        )

    old_data = snapshot(unit)
    await db.delete(unit)
    await AuditService(db).log_delete("units", old_data, local_id, current_user, client_ip(request))
    await db.commit()

    logger.info("Local deleted: %s by %s", old_data["reference_code"], current_user.email)
