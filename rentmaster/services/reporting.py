"""
Reporting service.

Read-only aggregations over units, leases and payments:
- revenue: COMPLETED payments bucketed by day or month and by payment mode
- occupancy: unit status counts per property and overall
- dashboard: counters, recent audit activity, 6-month trend, top properties

Nothing here writes; each call is a plain snapshot without a transaction.
"""

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentmaster.core.errors import InvalidInputError
from rentmaster.models.audit import AuditLog
from rentmaster.models.enums import LeaseStatus, PaymentStatus, UnitStatus
from rentmaster.models.lease import Lease
from rentmaster.models.payment import Payment, PaymentMode
from rentmaster.models.property import Property, Unit
from rentmaster.models.tenant import Tenant
from rentmaster.schemas.dashboard import (
    DashboardCounters,
    DashboardStats,
    OccupancyReport,
    OccupancyTotals,
    PropertyOccupancy,
    RecentActivity,
    RevenueByMode,
    RevenueGrouping,
    RevenuePeriod,
    RevenueReport,
    TopProperty,
)

logger = logging.getLogger(__name__)

TREND_MONTHS = 6
TOP_PROPERTIES = 5
RECENT_ACTIVITY = 10


def month_start(day: date, months_back: int = 0) -> date:
    """First day of the month `months_back` months before `day`'s month."""
    index = day.year * 12 + (day.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def date_bounds(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """Half-open datetime range covering both dates entirely."""
    return (
        datetime.combine(start_date, time.min),
        datetime.combine(end_date, time.min) + timedelta(days=1),
    )


def percentage(part: int, total: int) -> float:
    """part / total as a percentage with two decimals; 0 when total is 0."""
    if total == 0:
        return 0.0
    return round(part / total * 100, 2)


CENT = Decimal("0.01")


def _money(value) -> Decimal:
    """SUM() result as an exact two-decimal amount; 0.00 for an empty group."""
    return Decimal(value or 0).quantize(CENT)


class ReportingService:
    """Revenue, occupancy and dashboard aggregations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ------------------------------------------------------------------
    # Revenue
    # ------------------------------------------------------------------

    async def revenue(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        group_by: RevenueGrouping = RevenueGrouping.MONTH,
    ) -> RevenueReport:
        """Completed revenue between two inclusive dates."""
        today = datetime.utcnow().date()
        start_date = start_date or date(today.year, 1, 1)
        end_date = end_date or today
        if end_date < start_date:
            raise InvalidInputError("end_date must not be before start_date")
        start, end = date_bounds(start_date, end_date)
        logger.debug("Revenue report %s..%s grouped by %s", start_date, end_date, group_by.value)

        in_range = (
            Payment.status == PaymentStatus.COMPLETED,
            Payment.paid_at >= start,
            Payment.paid_at < end,
        )

        buckets = [extract("year", Payment.paid_at), extract("month", Payment.paid_at)]
        if group_by == RevenueGrouping.DAY:
            buckets.append(extract("day", Payment.paid_at))

        period_rows = await self.db.execute(
            select(*buckets, func.sum(Payment.amount), func.count(Payment.id))
            .where(*in_range)
            .group_by(*buckets)
            .order_by(*buckets)
        )
        revenue_data = []
        for row in period_rows.all():
            parts = [int(value) for value in row[: len(buckets)]]
            period = "-".join([f"{parts[0]:04d}"] + [f"{p:02d}" for p in parts[1:]])
            revenue_data.append(
                RevenuePeriod(period=period, amount=_money(row[-2]), count=row[-1])
            )

        mode_rows = await self.db.execute(
            select(PaymentMode.display_name, func.sum(Payment.amount), func.count(Payment.id))
            .select_from(Payment)
            .join(PaymentMode, Payment.payment_mode_id == PaymentMode.id)
            .where(*in_range)
            .group_by(PaymentMode.display_name)
            .order_by(PaymentMode.display_name)
        )
        by_mode = [
            RevenueByMode(payment_mode=name, amount=_money(amount), count=count)
            for name, amount, count in mode_rows.all()
        ]

        return RevenueReport(
            start_date=start_date,
            end_date=end_date,
            group_by=group_by,
            revenue_data=revenue_data,
            revenue_by_payment_mode=by_mode,
            total_revenue=sum((item.amount for item in revenue_data), Decimal("0.00")),
            total_transactions=sum(item.count for item in revenue_data),
        )

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    async def occupancy(self) -> OccupancyReport:
        result = await self.db.execute(
            select(Property)
            .options(selectinload(Property.units))
            .order_by(Property.name)
            .execution_options(populate_existing=True)
        )
        properties = result.scalars().all()

        lease_rows = await self.db.execute(
            select(Unit.property_id, func.count(Lease.id))
            .select_from(Unit)
            .join(Lease, Lease.unit_id == Unit.id)
            .where(Lease.status == LeaseStatus.ACTIVE)
            .group_by(Unit.property_id)
        )
        active_leases = dict(lease_rows.all())

        rows = []
        for prop in properties:
            statuses = [unit.status for unit in prop.units]
            occupied = statuses.count(UnitStatus.OCCUPIED)
            rows.append(
                PropertyOccupancy(
                    property_id=prop.id,
                    property_name=prop.name,
                    location=prop.location,
                    total_units=len(statuses),
                    occupied_units=occupied,
                    available_units=statuses.count(UnitStatus.AVAILABLE),
                    maintenance_units=statuses.count(UnitStatus.MAINTENANCE),
                    active_leases=active_leases.get(prop.id, 0),
                    occupancy_rate=percentage(occupied, len(statuses)),
                )
            )

        total_units = sum(row.total_units for row in rows)
        total_occupied = sum(row.occupied_units for row in rows)
        overall = round(total_occupied / total_units * 10000) / 100 if total_units else 0.0

        return OccupancyReport(
            properties=rows,
            overall_stats=OccupancyTotals(
                total_properties=len(rows),
                total_units=total_units,
                total_occupied=total_occupied,
                total_available=sum(row.available_units for row in rows),
                total_maintenance=sum(row.maintenance_units for row in rows),
                overall_occupancy_rate=overall,
            ),
        )

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    async def dashboard(self) -> DashboardStats:
        now = datetime.utcnow()
        today = now.date()
        current_month = datetime.combine(month_start(today), time.min)
        next_month = datetime.combine(month_start(today, -1), time.min)

        total_units = await self._count(Unit.id)
        occupied_units = await self._count(Unit.id, Unit.status == UnitStatus.OCCUPIED)

        monthly_revenue = await self.db.scalar(
            select(func.sum(Payment.amount)).where(
                Payment.status == PaymentStatus.COMPLETED,
                Payment.paid_at >= current_month,
                Payment.paid_at < next_month,
            )
        )

        counters = DashboardCounters(
            total_properties=await self._count(Property.id),
            total_units=total_units,
            available_units=await self._count(Unit.id, Unit.status == UnitStatus.AVAILABLE),
            occupied_units=occupied_units,
            total_tenants=await self._count(Tenant.id),
            active_leases=await self._count(Lease.id, Lease.status == LeaseStatus.ACTIVE),
            total_payments=await self._count(Payment.id),
            monthly_revenue=_money(monthly_revenue),
            overdue_payments=await self._count(
                Payment.id,
                Payment.status == PaymentStatus.PENDING,
                Payment.paid_at < now,
            ),
            occupancy_rate=percentage(occupied_units, total_units),
        )

        trend = await self.revenue(
            start_date=month_start(today, TREND_MONTHS - 1),
            end_date=today,
            group_by=RevenueGrouping.MONTH,
        )

        return DashboardStats(
            stats=counters,
            recent_activities=await self._recent_activity(),
            revenue_trend=trend.revenue_data,
            top_properties=await self._top_properties(current_month, next_month),
        )

    async def _count(self, column, *criteria) -> int:
        return await self.db.scalar(select(func.count(column)).where(*criteria)) or 0

    async def _recent_activity(self) -> list[RecentActivity]:
        result = await self.db.execute(
            select(AuditLog)
            .options(selectinload(AuditLog.user))
            .order_by(AuditLog.created_at.desc())
            .limit(RECENT_ACTIVITY)
        )
        return [RecentActivity.model_validate(entry) for entry in result.scalars().all()]

    async def _top_properties(self, since: datetime, until: datetime) -> list[TopProperty]:
        """Properties ranked by this month's completed revenue."""
        month_payments = Lease.payments.and_(
            Payment.status == PaymentStatus.COMPLETED,
            Payment.paid_at >= since,
            Payment.paid_at < until,
        )
        result = await self.db.execute(
            select(Property)
            .options(
                selectinload(Property.units)
                .selectinload(Unit.leases)
                .selectinload(month_payments)
            )
            .order_by(Property.name)
            .execution_options(populate_existing=True)
        )

        ranked = []
        for prop in result.scalars().all():
            revenue = sum(
                (payment.amount for unit in prop.units for lease in unit.leases for payment in lease.payments),
                Decimal("0"),
            )
            ranked.append(
                TopProperty(
                    id=prop.id,
                    name=prop.name,
                    location=prop.location,
                    total_revenue=_money(revenue),
                    units_count=len(prop.units),
                    occupied_units=sum(1 for u in prop.units if u.status == UnitStatus.OCCUPIED),
                )
            )

        ranked.sort(key=lambda item: item.total_revenue, reverse=True)
        return ranked[:TOP_PROPERTIES]
