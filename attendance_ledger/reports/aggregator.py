"""Report aggregation: join declarations with work-time summaries.

Rows are keyed by ``(staff_id, date)`` with no fan-out. Either side may be
missing, including when the two ledgers were read at slightly different
moments; the missing side is rendered as ``NOT_AVAILABLE``.
"""

from __future__ import annotations

import calendar
import uuid
from datetime import date, datetime, time
from typing import Iterable, Optional, Protocol

from attendance_ledger.common.constants import (
    NOT_AVAILABLE,
    TIME_FORMAT,
    DeclarationStatus,
    Punctuality,
    WorkProgress,
)
from attendance_ledger.common.timeutils import local_today
from attendance_ledger.reports.schemas import CombinedReportRow, ReportFilter, WorkTimeSummary

JoinKey = tuple[uuid.UUID, date]


class RosterEntry(Protocol):
    id: uuid.UUID
    name: str


class DeclarationRecord(Protocol):
    id: uuid.UUID
    staff_id: uuid.UUID
    status: DeclarationStatus
    date: date
    time_of_day: time


def resolve_date_range(
    report_filter: ReportFilter,
    today: Optional[date] = None,
) -> Optional[tuple[date, date]]:
    """Inclusive ``(first, last)`` day selected by the filter, or None for all.

    A month without a year means that month of the current year.
    """
    if report_filter.month is not None:
        year = report_filter.year or (today or local_today()).year
        last_day = calendar.monthrange(year, report_filter.month)[1]
        return date(year, report_filter.month, 1), date(year, report_filter.month, last_day)
    if report_filter.year is not None:
        return date(report_filter.year, 1, 1), date(report_filter.year, 12, 31)
    return None


# ── Rendering ───────────────────────────────────────────────────────

def _render_clock(ts: Optional[datetime]) -> str:
    return ts.strftime(TIME_FORMAT) if ts is not None else NOT_AVAILABLE


def _render_total_hours(summary: WorkTimeSummary) -> str:
    if summary.duration is not None:
        return summary.duration.render()
    if summary.progress == WorkProgress.in_progress:
        return WorkProgress.in_progress.value
    return NOT_AVAILABLE


def _render_punctuality(summary: WorkTimeSummary) -> str:
    if summary.punctuality == Punctuality.none:
        return NOT_AVAILABLE
    return summary.punctuality.value


def _build_row(
    key: JoinKey,
    name: str,
    declaration: Optional[DeclarationRecord],
    summary: Optional[WorkTimeSummary],
) -> CombinedReportRow:
    staff_id, day = key
    row = dict(
        id=NOT_AVAILABLE,
        staff_id=staff_id,
        name=name,
        time=NOT_AVAILABLE,
        status=NOT_AVAILABLE,
        date=day,
        clock_in_time=NOT_AVAILABLE,
        clock_out_time=NOT_AVAILABLE,
        total_hours=NOT_AVAILABLE,
        keterangan=NOT_AVAILABLE,
    )
    if declaration is not None:
        row.update(
            id=str(declaration.id),
            time=declaration.time_of_day.strftime(TIME_FORMAT),
            status=DeclarationStatus(declaration.status).value,
        )
    if summary is not None:
        row.update(
            clock_in_time=_render_clock(summary.clock_in),
            clock_out_time=_render_clock(summary.clock_out),
            total_hours=_render_total_hours(summary),
            keterangan=_render_punctuality(summary),
        )
    return CombinedReportRow(**row)


# ── Aggregate ───────────────────────────────────────────────────────

def aggregate(
    staff: Iterable[RosterEntry],
    declarations: Iterable[DeclarationRecord],
    summaries: Iterable[WorkTimeSummary],
    report_filter: Optional[ReportFilter] = None,
    *,
    today: Optional[date] = None,
) -> list[CombinedReportRow]:
    """Filter, join and sort into export order (staff, date, declaration id)."""

    report_filter = report_filter or ReportFilter()
    span = resolve_date_range(report_filter, today)

    def selected(staff_id: uuid.UUID, day: date) -> bool:
        if report_filter.staff_id is not None and staff_id != report_filter.staff_id:
            return False
        return span is None or span[0] <= day <= span[1]

    names = {
        member.id: member.name
        for member in staff
        if report_filter.staff_id is None or member.id == report_filter.staff_id
    }

    declaration_by_key: dict[JoinKey, DeclarationRecord] = {}
    for declaration in sorted(declarations, key=lambda d: str(d.id)):
        if selected(declaration.staff_id, declaration.date):
            declaration_by_key.setdefault((declaration.staff_id, declaration.date), declaration)

    summary_by_key: dict[JoinKey, WorkTimeSummary] = {}
    for summary in summaries:
        if selected(summary.staff_id, summary.date):
            summary_by_key[(summary.staff_id, summary.date)] = summary

    rows = [
        _build_row(
            key,
            names.get(key[0], NOT_AVAILABLE),
            declaration_by_key.get(key),
            summary_by_key.get(key),
        )
        for key in declaration_by_key.keys() | summary_by_key.keys()
    ]
    rows.sort(key=lambda r: (str(r.staff_id), r.date, r.id))
    return rows
