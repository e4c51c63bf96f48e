"""Reports router — combined JSON report, per-staff work time and xlsx export."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.database import get_db
from attendance_ledger.reports.schemas import CombinedReportRow, ReportFilter, WorkTimeSummary
from attendance_ledger.reports.service import ReportService
from attendance_ledger.reports.sink import EXPORT_FILENAME, XLSX_MEDIA_TYPE, XlsxRowSink

router = APIRouter(prefix="", tags=["reports"])


def report_filter(
    staff_id: Optional[uuid.UUID] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12, description="1-indexed month"),
    year: Optional[int] = Query(None, ge=1, le=9999),
) -> ReportFilter:
    return ReportFilter(staff_id=staff_id, month=month, year=year)


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=list[CombinedReportRow])
async def combined_report(
    filters: ReportFilter = Depends(report_filter),
    db: AsyncSession = Depends(get_db),
):
    """Declarations joined with clock sessions, grouped by staff then date."""
    return await ReportService.combined_report(db, filters)


# ── GET /work-time/{staff_id} ───────────────────────────────────────

@router.get("/work-time/{staff_id}", response_model=list[WorkTimeSummary])
async def work_time(staff_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """Per-day clock-in / clock-out summaries for one staff member."""
    return await ReportService.work_time_for_staff(db, staff_id)


# ── GET /export ─────────────────────────────────────────────────────

@router.get("/export")
async def export_report(
    filters: ReportFilter = Depends(report_filter),
    db: AsyncSession = Depends(get_db),
):
    """Download the combined report as an Excel workbook."""
    content = await ReportService.export(db, filters, XlsxRowSink())
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
    )
