"""Nested responses spanning several entities."""

from rentmaster.schemas.document import DocumentResponse
from rentmaster.schemas.lease import LeaseResponse, LeaseWithLocal, LeaseWithTenant
from rentmaster.schemas.payment import PaymentSummary
from rentmaster.schemas.property import PropertySummary, UnitResponse
from rentmaster.schemas.tenant import TenantSummary


class UnitWithLeases(UnitResponse):
    leases: list[LeaseWithTenant] = []


class PropertyResponse(PropertySummary):
    """Property with units and their leases.

    The list endpoint loads ACTIVE leases only; the detail endpoint loads all.
    """

    units: list[UnitWithLeases] = []


class LeaseWithPayments(LeaseWithLocal):
    payments: list[PaymentSummary] = []


class TenantResponse(TenantSummary):
    leases: list[LeaseWithLocal] = []


class TenantDetailResponse(TenantSummary):
    leases: list[LeaseWithPayments] = []


class LeaseDetailResponse(LeaseResponse):
    """Lease with payments and attached documents."""

    payments: list[PaymentSummary] = []
    documents: list[DocumentResponse] = []


class PaymentResponse(PaymentSummary):
    """Payment with its lease, tenant and unit."""

    lease: LeaseResponse
