"""Lease model."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    String,
    DateTime,
    ForeignKey,
    Enum as SQLEnum,
    Numeric,
    CheckConstraint,
    Index,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentmaster.core.database import Base
from rentmaster.models.enums import LeaseStatus, BillingCycle

if TYPE_CHECKING:
    from rentmaster.models.property import Unit
    from rentmaster.models.tenant import Tenant
    from rentmaster.models.payment import Payment


class Lease(Base):
    """A lease binding one tenant to one unit."""

    __tablename__ = "leases"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    unit_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("units.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    lease_reference: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    # Dates
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    rent_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    billing_cycle: Mapped[BillingCycle] = mapped_column(SQLEnum(BillingCycle), nullable=False)
    status: Mapped[LeaseStatus] = mapped_column(
        SQLEnum(LeaseStatus),
        default=LeaseStatus.ACTIVE,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="leases")
    unit: Mapped["Unit"] = relationship("Unit", back_populates="leases")
    payments: Mapped[list["Payment"]] = relationship(
        "Payment", back_populates="lease", order_by="Payment.paid_at.desc()"
    )

    __table_args__ = (
        CheckConstraint("rent_amount > 0", name="ck_lease_rent_amount_positive"),
        # At most one ACTIVE lease per unit, whatever the request interleaving
        Index(
            "uq_leases_active_unit",
            "unit_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
    )
