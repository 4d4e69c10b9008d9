"""Payment and PaymentMode models."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    String,
    DateTime,
    Boolean,
    ForeignKey,
    Enum as SQLEnum,
    Numeric,
    CheckConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentmaster.core.database import Base
from rentmaster.models.enums import PaymentStatus

if TYPE_CHECKING:
    from rentmaster.models.lease import Lease


class PaymentMode(Base):
    """A named method of payment (cash, bank transfer, ...)."""

    __tablename__ = "payment_modes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    requires_proof: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Payment(Base):
    """A payment recorded against a lease. Plain transaction log, no balance."""

    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    lease_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("leases.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    payment_mode_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("payment_modes.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus),
        default=PaymentStatus.COMPLETED,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    lease: Mapped["Lease"] = relationship("Lease", back_populates="payments")
    payment_mode: Mapped["PaymentMode"] = relationship("PaymentMode")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payment_amount_positive"),
    )
