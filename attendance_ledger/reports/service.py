"""Report service — load ledger data for a filter and join it.

Declarations and session events are read with separate queries; no snapshot
is shared between them, and the aggregator tolerates the difference.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.common.timeutils import local_today
from attendance_ledger.declarations.service import DeclarationLedger
from attendance_ledger.reports.aggregator import aggregate, resolve_date_range
from attendance_ledger.reports.schemas import CombinedReportRow, ReportFilter, WorkTimeSummary
from attendance_ledger.reports.sink import RowSink, export_rows
from attendance_ledger.reports.worktime import derive, derive_all
from attendance_ledger.sessions.service import SessionLedger
from attendance_ledger.staff.service import StaffService

logger = logging.getLogger(__name__)


class ReportService:
    """Async report generation over the declaration and session ledgers."""

    @staticmethod
    async def combined_report(
        db: AsyncSession,
        report_filter: ReportFilter,
        *,
        today: Optional[date] = None,
    ) -> list[CombinedReportRow]:
        """Declarations joined with derived work time, in export order."""

        today = today or local_today()
        if report_filter.staff_id is not None:
            await StaffService.get_staff(db, report_filter.staff_id)

        span = resolve_date_range(report_filter, today)
        first, last = span if span is not None else (None, None)

        staff = await StaffService.list_staff(db, staff_id=report_filter.staff_id)
        declarations = await DeclarationLedger.query(
            db, staff_id=report_filter.staff_id, from_date=first, to_date=last,
        )
        events = await SessionLedger.list_in_range(
            db, staff_id=report_filter.staff_id, from_day=first, to_day=last,
        )

        rows = aggregate(staff, declarations, derive_all(events), report_filter, today=today)
        logger.info(
            "Combined report built: staff=%s range=%s..%s rows=%d",
            report_filter.staff_id,
            first,
            last,
            len(rows),
        )
        return rows

    @staticmethod
    async def work_time_for_staff(
        db: AsyncSession,
        staff_id: uuid.UUID,
    ) -> list[WorkTimeSummary]:
        events = await SessionLedger.list_for_staff(db, staff_id)
        return derive(staff_id, events)

    @staticmethod
    async def export(
        db: AsyncSession,
        report_filter: ReportFilter,
        sink: RowSink,
        *,
        today: Optional[date] = None,
    ) -> bytes:
        """Write the combined report into *sink* and return the encoded bytes."""

        rows = await ReportService.combined_report(db, report_filter, today=today)
        return export_rows(rows, sink)
