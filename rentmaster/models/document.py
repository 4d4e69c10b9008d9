"""Document model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey, Enum as SQLEnum, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentmaster.core.database import Base
from rentmaster.models.enums import OwnerTable

if TYPE_CHECKING:
    from rentmaster.models.user import User


class Document(Base):
    """A stored file attached to a lease or a payment.

    The owner reference is polymorphic (owner_table + owner_id) and is
    validated by the document service rather than by a foreign key.
    """

    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    owner_table: Mapped[OwnerTable] = mapped_column(SQLEnum(OwnerTable), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    file_key: Mapped[str] = mapped_column(String(255), nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    doc_type: Mapped[str] = mapped_column(String(100), nullable=False)

    uploaded_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    uploaded_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    uploaded_user: Mapped["User"] = relationship("User", back_populates="documents")

    __table_args__ = (
        Index("ix_documents_owner", "owner_table", "owner_id"),
    )
