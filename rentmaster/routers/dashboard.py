"""Dashboard router - summary, revenue and occupancy reports."""

import io
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from rentmaster.core.database import get_db
from rentmaster.core.security import AuthenticatedUser, get_current_user
from rentmaster.schemas.dashboard import (
    DashboardStats,
    OccupancyReport,
    RevenueGrouping,
    RevenueReport,
)
from rentmaster.services.pdf_generator import get_pdf_generator
from rentmaster.services.reporting import ReportingService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get dashboard statistics.

    Returns:
    - Counters (properties, locals, tenants, leases, payments, overdue)
    - Current month completed revenue and occupancy rate
    - 10 most recent audit entries
    - Monthly revenue for the trailing 6 months
    - Top 5 properties by this month's revenue
    """
    return await ReportingService(db).dashboard()


@router.get("/revenue", response_model=RevenueReport)
async def get_revenue_report(
    start_date: Optional[date] = Query(None, description="Defaults to January 1 of the current year"),
    end_date: Optional[date] = Query(None, description="Inclusive; defaults to today"),
    group_by: RevenueGrouping = RevenueGrouping.MONTH,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Completed revenue per period and per payment mode."""
    return await ReportingService(db).revenue(start_date, end_date, group_by)


@router.get("/revenue/pdf")
async def download_revenue_report(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    group_by: RevenueGrouping = RevenueGrouping.MONTH,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Revenue report as a PDF download."""
    report = await ReportingService(db).revenue(start_date, end_date, group_by)
    pdf_bytes = get_pdf_generator().generate_revenue_report(report)

    filename = f"revenue_{report.start_date.isoformat()}_{report.end_date.isoformat()}.pdf"
    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/occupancy", response_model=OccupancyReport)
async def get_occupancy_report(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Unit occupancy per property and overall."""
    return await ReportingService(db).occupancy()
