"""SQLAlchemy models for RentMaster."""

from rentmaster.models.user import User
from rentmaster.models.property import Property, Unit
from rentmaster.models.tenant import Tenant
from rentmaster.models.lease import Lease
from rentmaster.models.payment import Payment, PaymentMode
from rentmaster.models.document import Document
from rentmaster.models.audit import AuditLog

__all__ = [
    "User",
    "Property",
    "Unit",
    "Tenant",
    "Lease",
    "Payment",
    "PaymentMode",
    "Document",
    "AuditLog",
]
