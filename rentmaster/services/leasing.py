"""
Lease lifecycle service.

A lease and the status of its unit change together:
- create: ACTIVE lease + unit AVAILABLE -> OCCUPIED
- terminate (or update to TERMINATED): lease TERMINATED + unit -> AVAILABLE

Each operation runs in one transaction with its audit entry. The unit row is
locked (SELECT ... FOR UPDATE where supported), flipped with a conditional
UPDATE, and the partial unique index uq_leases_active_unit rejects a second
ACTIVE lease that slips past both.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentmaster.core.errors import ConflictError, InvalidInputError, NotFoundError, ServiceError
from rentmaster.core.security import AuthenticatedUser
from rentmaster.models.enums import AuditAction, LeaseStatus, UnitStatus
from rentmaster.models.lease import Lease
from rentmaster.models.payment import Payment
from rentmaster.models.property import Unit
from rentmaster.models.tenant import Tenant
from rentmaster.schemas.lease import LeaseCreate, LeaseTerminate, LeaseUpdate
from rentmaster.services.audit import AuditService, snapshot

logger = logging.getLogger(__name__)


def _lease_options(with_payments: bool = False) -> list:
    options = [
        selectinload(Lease.tenant),
        selectinload(Lease.unit).selectinload(Unit.property),
    ]
    if with_payments:
        options.append(selectinload(Lease.payments).selectinload(Payment.payment_mode))
    return options


class LeaseService:
    """Create, update, terminate and read leases."""

    def __init__(
        self,
        db: AsyncSession,
        actor: AuthenticatedUser,
        ip_address: Optional[str] = None,
    ):
        self.db = db
        self.actor = actor
        self.ip_address = ip_address
        self.audit = AuditService(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_leases(
        self,
        status: Optional[LeaseStatus] = None,
        tenant_id: Optional[UUID] = None,
        local_id: Optional[UUID] = None,
    ) -> list[Lease]:
        """Leases newest first, with tenant, unit and property."""
        query = select(Lease).options(*_lease_options())
        if status:
            query = query.where(Lease.status == status)
        if tenant_id:
            query = query.where(Lease.tenant_id == tenant_id)
        if local_id:
            query = query.where(Lease.unit_id == local_id)

        result = await self.db.execute(query.order_by(Lease.created_at.desc()))
        return list(result.scalars().all())

    async def get(self, lease_id: UUID, with_payments: bool = False) -> Lease:
        result = await self.db.execute(
            select(Lease)
            .options(*_lease_options(with_payments))
            .where(Lease.id == lease_id)
            .execution_options(populate_existing=True)
        )
        lease = result.scalar_one_or_none()
        if not lease:
            raise NotFoundError("Lease")
        return lease

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, data: LeaseCreate) -> Lease:
        """Create an ACTIVE lease and mark its unit OCCUPIED."""
        try:
            tenant = await self.db.get(Tenant, data.tenant_id)
            if not tenant:
                raise NotFoundError("Tenant")

            unit = await self._lock_unit(data.local_id)
            if unit.status != UnitStatus.AVAILABLE:
                raise ConflictError("Local is not available")
            if await self._has_active_lease(unit.id):
                raise ConflictError("Local is already leased")
            if await self._reference_taken(data.lease_reference):
                raise ConflictError("Lease reference already exists")

            lease = Lease(
                tenant_id=data.tenant_id,
                unit_id=unit.id,
                lease_reference=data.lease_reference,
                start_date=data.start_date,
                end_date=data.end_date,
                rent_amount=data.rent_amount,
                billing_cycle=data.billing_cycle,
                status=LeaseStatus.ACTIVE,
            )
            self.db.add(lease)

            flipped = await self.db.execute(
                update(Unit)
                .where(Unit.id == unit.id, Unit.status == UnitStatus.AVAILABLE)
                .values(status=UnitStatus.OCCUPIED)
            )
            if flipped.rowcount != 1:
                raise ConflictError("Local is not available")

            await self.db.flush()
            await self.audit.log_create("leases", lease, self.actor, self.ip_address)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(await self._integrity_message(data.lease_reference))
        except ServiceError:
            await self.db.rollback()
            raise

        logger.info("Lease created: %s by %s", lease.lease_reference, self.actor.email)
        return await self.get(lease.id)

    async def terminate(self, lease_id: UUID, data: LeaseTerminate) -> Lease:
        """Terminate an ACTIVE lease and free its unit."""
        try:
            lease = await self._lock_lease(lease_id)
            if lease.status == LeaseStatus.TERMINATED:
                raise ConflictError("Lease is already terminated")

            old_data = snapshot(lease)
            lease.status = LeaseStatus.TERMINATED
            lease.end_date = data.termination_date or datetime.utcnow()
            await self._release_unit(lease.unit_id)

            await self.db.flush()
            await self.audit.log_update(
                "leases", lease, old_data, self.actor, self.ip_address, action=AuditAction.TERMINATE
            )
            await self.db.commit()
        except ServiceError:
            await self.db.rollback()
            raise

        logger.info("Lease terminated: %s by %s", lease.lease_reference, self.actor.email)
        return await self.get(lease.id)

    async def update(self, lease_id: UUID, data: LeaseUpdate) -> Lease:
        """Update lease terms; status TERMINATED frees the unit like terminate()."""
        changes = data.model_dump(exclude_unset=True)
        try:
            lease = await self._lock_lease(lease_id)

            new_status = changes.get("status")
            if lease.status == LeaseStatus.TERMINATED and new_status == LeaseStatus.ACTIVE:
                raise ConflictError("Terminated lease cannot be reactivated")

            new_reference = changes.get("lease_reference")
            if new_reference and new_reference != lease.lease_reference:
                if await self._reference_taken(new_reference):
                    raise ConflictError("Lease reference already exists")

            start_date = changes.get("start_date") or lease.start_date
            end_date = changes["end_date"] if "end_date" in changes else lease.end_date
            if end_date is not None and end_date < start_date:
                raise InvalidInputError("end_date must not be before start_date")

            terminating = new_status == LeaseStatus.TERMINATED and lease.status == LeaseStatus.ACTIVE

            old_data = snapshot(lease)
            for field, value in changes.items():
                if value is None and field != "end_date":
                    continue
                setattr(lease, field, value)

            if terminating:
                if changes.get("end_date") is None:
                    lease.end_date = datetime.utcnow()
                await self._release_unit(lease.unit_id)

            await self.db.flush()
            await self.audit.log_update("leases", lease, old_data, self.actor, self.ip_address)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Lease reference already exists")
        except ServiceError:
            await self.db.rollback()
            raise

        logger.info("Lease updated: %s by %s", lease.lease_reference, self.actor.email)
        return await self.get(lease.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _lock_unit(self, unit_id: UUID) -> Unit:
        result = await self.db.execute(select(Unit).where(Unit.id == unit_id).with_for_update())
        unit = result.scalar_one_or_none()
        if not unit:
            raise NotFoundError("Local")
        return unit

    async def _lock_lease(self, lease_id: UUID) -> Lease:
        result = await self.db.execute(select(Lease).where(Lease.id == lease_id).with_for_update())
        lease = result.scalar_one_or_none()
        if not lease:
            raise NotFoundError("Lease")
        return lease

    async def _release_unit(self, unit_id: UUID) -> None:
        await self.db.execute(
            update(Unit).where(Unit.id == unit_id).values(status=UnitStatus.AVAILABLE)
        )

    async def _has_active_lease(self, unit_id: UUID) -> bool:
        result = await self.db.execute(
            select(Lease.id).where(Lease.unit_id == unit_id, Lease.status == LeaseStatus.ACTIVE)
        )
        return result.first() is not None

    async def _reference_taken(self, reference: str) -> bool:
        result = await self.db.execute(select(Lease.id).where(Lease.lease_reference == reference))
        return result.first() is not None

    async def _integrity_message(self, reference: str) -> str:
        """Name the constraint a concurrent writer won."""
        if await self._reference_taken(reference):
            return "Lease reference already exists"
        return "Local is already leased"
