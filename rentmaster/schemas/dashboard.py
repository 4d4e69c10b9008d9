"""Dashboard and report schemas."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from rentmaster.models.enums import AuditAction
from rentmaster.schemas.auth import UserBrief
from rentmaster.schemas.base import BaseSchema


class RevenueGrouping(str, Enum):
    DAY = "day"
    MONTH = "month"


class RevenuePeriod(BaseModel):
    period: str
    amount: Decimal
    count: int


class RevenueByMode(BaseModel):
    payment_mode: str
    amount: Decimal
    count: int


class RevenueReport(BaseModel):
    """Completed revenue over an inclusive date range."""

    start_date: date
    end_date: date
    group_by: RevenueGrouping
    revenue_data: list[RevenuePeriod]
    revenue_by_payment_mode: list[RevenueByMode]
    total_revenue: Decimal
    total_transactions: int


class PropertyOccupancy(BaseModel):
    property_id: UUID
    property_name: str
    location: str
    total_units: int
    occupied_units: int
    available_units: int
    maintenance_units: int
    active_leases: int
    occupancy_rate: float


class OccupancyTotals(BaseModel):
    total_properties: int
    total_units: int
    total_occupied: int
    total_available: int
    total_maintenance: int
    overall_occupancy_rate: float


class OccupancyReport(BaseModel):
    properties: list[PropertyOccupancy]
    overall_stats: OccupancyTotals


class DashboardCounters(BaseModel):
    total_properties: int
    total_units: int
    available_units: int
    occupied_units: int
    total_tenants: int
    active_leases: int
    total_payments: int
    monthly_revenue: Decimal
    overdue_payments: int
    occupancy_rate: float


class RecentActivity(BaseSchema):
    id: UUID
    action: AuditAction
    entity_table: str
    entity_id: Optional[UUID] = None
    user: Optional[UserBrief] = None
    created_at: datetime


class TopProperty(BaseModel):
    id: UUID
    name: str
    location: str
    total_revenue: Decimal
    units_count: int
    occupied_units: int


class DashboardStats(BaseModel):
    """Dashboard snapshot."""

    stats: DashboardCounters
    recent_activities: list[RecentActivity]
    revenue_trend: list[RevenuePeriod]
    top_properties: list[TopProperty]
