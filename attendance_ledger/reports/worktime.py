"""Work-time derivation: raw clock events → per-day summaries.

``derive`` is a pure function of the event *set*. Events are grouped by the
local calendar day of their timestamp and ordered by ``(timestamp, kind)``
inside a day, so input order never changes the result. The session ledger
admits at most one clock-in and one clock-out per day, which makes each
day's pairing unambiguous.
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import date, datetime, time, tzinfo
from typing import Iterable, Optional, Protocol

from attendance_ledger.common.constants import Punctuality, SessionEventKind, WorkProgress
from attendance_ledger.common.timeutils import to_local
from attendance_ledger.config import settings
from attendance_ledger.reports.schemas import WorkDuration, WorkTimeSummary


class ClockEvent(Protocol):
    staff_id: uuid.UUID
    kind: SessionEventKind
    timestamp: datetime


def classify_punctuality(clock_in: datetime, threshold: time) -> Punctuality:
    """Compare a local clock-in against the daily threshold on the same day."""

    arrived = clock_in.time()
    if arrived < threshold:
        return Punctuality.early_arrival
    if arrived.replace(microsecond=0) == threshold:
        return Punctuality.on_time
    return Punctuality.late


def summarize_day(
    staff_id: uuid.UUID,
    day: date,
    clock_in: Optional[datetime],
    clock_out: Optional[datetime],
    threshold: time,
) -> WorkTimeSummary:
    duration = None
    punctuality = Punctuality.none

    if clock_in is not None:
        punctuality = classify_punctuality(clock_in, threshold)
    if clock_in is not None and clock_out is not None:
        duration = WorkDuration.from_timedelta(clock_out - clock_in)
        progress = WorkProgress.completed
    elif clock_in is not None:
        progress = WorkProgress.in_progress
    else:
        progress = WorkProgress.incomplete

    return WorkTimeSummary(
        staff_id=staff_id,
        date=day,
        clock_in=clock_in,
        clock_out=clock_out,
        duration=duration,
        punctuality=punctuality,
        progress=progress,
    )


def derive(
    staff_id: uuid.UUID,
    events: Iterable[ClockEvent],
    *,
    tz: Optional[tzinfo] = None,
    threshold: Optional[time] = None,
) -> list[WorkTimeSummary]:
    """Per-day summaries for one staff member, ordered by date."""

    tz = tz or settings.local_tz
    threshold = threshold or settings.PUNCTUALITY_THRESHOLD

    by_day: dict[date, list[tuple[datetime, SessionEventKind]]] = defaultdict(list)
    for event in events:
        local_ts = to_local(event.timestamp, tz)
        by_day[local_ts.date()].append((local_ts, SessionEventKind(event.kind)))

    summaries: list[WorkTimeSummary] = []
    for day in sorted(by_day):
        ordered = sorted(by_day[day], key=lambda item: (item[0], item[1].value))
        clock_in = next((ts for ts, kind in ordered if kind == SessionEventKind.clock_in), None)
        clock_out = next((ts for ts, kind in ordered if kind == SessionEventKind.clock_out), None)
        if clock_in is None and clock_out is None:
            continue
        summaries.append(summarize_day(staff_id, day, clock_in, clock_out, threshold))
    return summaries


def derive_all(
    events: Iterable[ClockEvent],
    *,
    tz: Optional[tzinfo] = None,
    threshold: Optional[time] = None,
) -> list[WorkTimeSummary]:
    """Summaries for every staff member present in *events*."""

    by_staff: dict[uuid.UUID, list[ClockEvent]] = defaultdict(list)
    for event in events:
        by_staff[event.staff_id].append(event)

    summaries: list[WorkTimeSummary] = []
    for staff_id in sorted(by_staff, key=str):
        summaries.extend(derive(staff_id, by_staff[staff_id], tz=tz, threshold=threshold))
    return summaries
