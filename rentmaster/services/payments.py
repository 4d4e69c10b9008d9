"""Payment recording service. Payments are a plain log; no balance is kept."""

import logging
from datetime import datetime, time, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentmaster.core.errors import ConflictError, NotFoundError
from rentmaster.core.security import AuthenticatedUser
from rentmaster.models.document import Document
from rentmaster.models.enums import OwnerTable
from rentmaster.models.lease import Lease
from rentmaster.models.payment import Payment, PaymentMode
from rentmaster.models.property import Unit
from rentmaster.schemas.payment import PaymentCreate, PaymentFilters, PaymentUpdate
from rentmaster.services.audit import AuditService, snapshot

logger = logging.getLogger(__name__)


def _payment_options() -> list:
    return [
        selectinload(Payment.payment_mode),
        selectinload(Payment.lease).selectinload(Lease.tenant),
        selectinload(Payment.lease).selectinload(Lease.unit).selectinload(Unit.property),
    ]


class PaymentService:
    """CRUD over payments and the payment mode catalogue."""

    def __init__(
        self,
        db: AsyncSession,
        actor: Optional[AuthenticatedUser] = None,
        ip_address: Optional[str] = None,
    ):
        self.db = db
        self.actor = actor
        self.ip_address = ip_address
        self.audit = AuditService(db)

    async def list_modes(self) -> list[PaymentMode]:
        result = await self.db.execute(select(PaymentMode).order_by(PaymentMode.display_name))
        return list(result.scalars().all())

    async def list_payments(self, filters: PaymentFilters) -> list[Payment]:
        """Payments newest first. Date filters are inclusive calendar days."""
        query = select(Payment).options(*_payment_options())
        if filters.lease_id:
            query = query.where(Payment.lease_id == filters.lease_id)
        if filters.status:
            query = query.where(Payment.status == filters.status)
        if filters.payment_mode_id:
            query = query.where(Payment.payment_mode_id == filters.payment_mode_id)
        if filters.start_date:
            query = query.where(Payment.paid_at >= datetime.combine(filters.start_date, time.min))
        if filters.end_date:
            end = datetime.combine(filters.end_date, time.min) + timedelta(days=1)
            query = query.where(Payment.paid_at < end)

        result = await self.db.execute(query.order_by(Payment.paid_at.desc()))
        return list(result.scalars().all())

    async def get(self, payment_id: UUID) -> Payment:
        result = await self.db.execute(
            select(Payment)
            .options(*_payment_options())
            .where(Payment.id == payment_id)
            .execution_options(populate_existing=True)
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise NotFoundError("Payment")
        return payment

    async def create(self, data: PaymentCreate) -> Payment:
        if not await self.db.get(Lease, data.lease_id):
            raise NotFoundError("Lease")
        await self._require_mode(data.payment_mode_id)

        payment = Payment(
            lease_id=data.lease_id,
            amount=data.amount,
            payment_mode_id=data.payment_mode_id,
            reference=data.reference,
            status=data.status,
            paid_at=data.paid_at or datetime.utcnow(),
        )
        self.db.add(payment)
        await self.db.flush()
        await self.audit.log_create("payments", payment, self.actor, self.ip_address)
        await self.db.commit()

        logger.info("Payment created: %s for lease %s by %s", payment.amount, payment.lease_id, self.actor.email)
        return await self.get(payment.id)

    async def update(self, payment_id: UUID, data: PaymentUpdate) -> Payment:
        payment = await self.db.get(Payment, payment_id)
        if not payment:
            raise NotFoundError("Payment")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "payment_mode_id" in changes:
            await self._require_mode(changes["payment_mode_id"])

        old_data = snapshot(payment)
        for field, value in changes.items():
            setattr(payment, field, value)

        await self.db.flush()
        await self.audit.log_update("payments", payment, old_data, self.actor, self.ip_address)
        await self.db.commit()

        logger.info("Payment updated: %s by %s", payment.id, self.actor.email)
        return await self.get(payment.id)

    async def delete(self, payment_id: UUID) -> None:
        payment = await self.db.get(Payment, payment_id)
        if not payment:
            raise NotFoundError("Payment")

        attached = await self.db.scalar(
            select(func.count(Document.id)).where(
                Document.owner_table == OwnerTable.PAYMENTS,
                Document.owner_id == payment_id,
            )
        )
        if attached:
            raise ConflictError("Cannot delete payment with attached documents")

        old_data = snapshot(payment)
        await self.db.delete(payment)
        await self.audit.log_delete("payments", old_data, payment_id, self.actor, self.ip_address)
        await self.db.commit()

        logger.info("Payment deleted: %s by %s", payment_id, self.actor.email)

    async def _require_mode(self, payment_mode_id: UUID) -> PaymentMode:
        mode = await self.db.get(PaymentMode, payment_mode_id)
        if not mode:
            raise NotFoundError("Payment mode")
        return mode
