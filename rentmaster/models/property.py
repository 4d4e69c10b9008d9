"""Property and Unit models."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Float, ForeignKey, Enum as SQLEnum, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentmaster.core.database import Base
from rentmaster.models.enums import UnitStatus

if TYPE_CHECKING:
    from rentmaster.models.lease import Lease


class Property(Base):
    """A property (building/complex) made of leasable units."""

    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    units: Mapped[list["Unit"]] = relationship(
        "Unit", back_populates="property", order_by="Unit.reference_code"
    )


class Unit(Base):
    """A rentable unit ("local") within a property."""

    __tablename__ = "units"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    reference_code: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    floor: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    unit_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    size_m2: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # OCCUPIED iff an ACTIVE lease references this unit
    status: Mapped[UnitStatus] = mapped_column(
        SQLEnum(UnitStatus),
        default=UnitStatus.AVAILABLE,
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="units")
    leases: Mapped[list["Lease"]] = relationship("Lease", back_populates="unit")
