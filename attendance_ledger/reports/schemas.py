"""Report Pydantic v2 schemas — derived work-time summaries and combined rows.

Nothing here is persisted; every value is recomputed from the ledgers.
"""

import uuid
from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field

from attendance_ledger.common.constants import Punctuality, WorkProgress


class WorkDuration(BaseModel):
    """Elapsed time split into whole hours, minutes and seconds (floored)."""

    hours: int
    minutes: int
    seconds: int

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "WorkDuration":
        total_seconds = delta // timedelta(seconds=1)
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return cls(hours=hours, minutes=minutes, seconds=seconds)

    def render(self) -> str:
        return f"{self.hours} hours {self.minutes} minutes {self.seconds} seconds"


class WorkTimeSummary(BaseModel):
    """One staff member's clock-in / clock-out pairing for one local day."""

    staff_id: uuid.UUID
    date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    duration: Optional[WorkDuration] = None
    punctuality: Punctuality = Punctuality.none
    progress: WorkProgress


class ReportFilter(BaseModel):
    """Optional staff / month / year restriction for combined reports."""

    staff_id: Optional[uuid.UUID] = None
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=1, le=9999)


class CombinedReportRow(BaseModel):
    """Declaration joined with the day's work-time summary.

    A missing side is rendered as ``"N/A"`` rather than null.
    """

    id: str
    staff_id: uuid.UUID
    name: str
    time: str
    status: str
    date: date
    clock_in_time: str
    clock_out_time: str
    total_hours: str
    keterangan: str
