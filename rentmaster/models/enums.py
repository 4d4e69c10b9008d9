"""Enumeration types for the RentMaster domain model."""

from enum import Enum


class UserRole(str, Enum):
    """Role of a back-office user."""
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"


class UnitStatus(str, Enum):
    """Status of a unit (local)."""
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"      # driven by lease create/terminate only
    MAINTENANCE = "MAINTENANCE"


class TenantType(str, Enum):
    """Kind of tenant."""
    INDIVIDUAL = "INDIVIDUAL"
    COMPANY = "COMPANY"


class LeaseStatus(str, Enum):
    """Status of a lease. TERMINATED is terminal."""
    ACTIVE = "ACTIVE"
    TERMINATED = "TERMINATED"


class BillingCycle(str, Enum):
    """Nominal rent cadence."""
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"


class PaymentStatus(str, Enum):
    """Status of a payment."""
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class OwnerTable(str, Enum):
    """Entity a document is attached to."""
    LEASES = "LEASES"
    PAYMENTS = "PAYMENTS"


class AuditAction(str, Enum):
    """Audit log action types."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    TERMINATE = "TERMINATE"
