"""Pydantic request/response schemas."""

from rentmaster.schemas.base import BaseSchema, IDMixin, TimestampMixin, UTCDateTime
from rentmaster.schemas.auth import UserRegister, UserResponse, UserBrief, CurrentUserResponse
from rentmaster.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertySummary,
    UnitCreate,
    UnitUpdate,
    UnitResponse,
    UnitWithProperty,
)
from rentmaster.schemas.tenant import TenantCreate, TenantUpdate, TenantSummary
from rentmaster.schemas.payment import (
    PaymentModeResponse,
    PaymentCreate,
    PaymentUpdate,
    PaymentFilters,
    PaymentSummary,
)
from rentmaster.schemas.lease import (
    LeaseCreate,
    LeaseUpdate,
    LeaseTerminate,
    LeaseSummary,
    LeaseWithTenant,
    LeaseWithLocal,
    LeaseResponse,
)
from rentmaster.schemas.document import DocumentResponse
from rentmaster.schemas.detail import (
    UnitWithLeases,
    PropertyResponse,
    LeaseWithPayments,
    TenantResponse,
    TenantDetailResponse,
    LeaseDetailResponse,
    PaymentResponse,
)
from rentmaster.schemas.dashboard import (
    RevenueGrouping,
    RevenuePeriod,
    RevenueByMode,
    RevenueReport,
    PropertyOccupancy,
    OccupancyTotals,
    OccupancyReport,
    DashboardCounters,
    RecentActivity,
    TopProperty,
    DashboardStats,
)
