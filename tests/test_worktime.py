"""Work-time derivation tests — pairing, punctuality and durations."""

from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

import pytest

from attendance_ledger.common.constants import Punctuality, SessionEventKind, WorkProgress
from attendance_ledger.reports.schemas import WorkDuration
from attendance_ledger.reports.worktime import classify_punctuality, derive, derive_all
from tests.conftest import LOCAL_TZ, local_dt

STAFF = uuid.UUID("00000000-0000-0000-0000-000000000001")
THRESHOLD = time(7, 0, 0)


@dataclass
class Event:
    staff_id: uuid.UUID
    kind: SessionEventKind
    timestamp: datetime


def clock_in(ts: datetime, staff_id: uuid.UUID = STAFF) -> Event:
    return Event(staff_id, SessionEventKind.clock_in, ts)


def clock_out(ts: datetime, staff_id: uuid.UUID = STAFF) -> Event:
    return Event(staff_id, SessionEventKind.clock_out, ts)


# ═════════════════════════════════════════════════════════════════════
# 1. PUNCTUALITY
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "arrived, expected",
    [
        (time(6, 59, 59), Punctuality.early_arrival),
        (time(7, 0, 0), Punctuality.on_time),
        (time(7, 0, 0, 400_000), Punctuality.on_time),
        (time(7, 0, 1), Punctuality.late),
        (time(13, 0, 0), Punctuality.late),
    ],
)
def test_classify_punctuality_boundaries(arrived, expected):
    clock_in_at = datetime.combine(date(2024, 3, 4), arrived, tzinfo=LOCAL_TZ)
    assert classify_punctuality(clock_in_at, THRESHOLD) == expected


# ═════════════════════════════════════════════════════════════════════
# 2. DURATION
# ═════════════════════════════════════════════════════════════════════


def test_duration_floors_to_whole_seconds():
    duration = WorkDuration.from_timedelta(timedelta(hours=8, minutes=30, seconds=15, milliseconds=999))
    assert (duration.hours, duration.minutes, duration.seconds) == (8, 30, 15)
    assert duration.render() == "8 hours 30 minutes 15 seconds"


def test_completed_day():
    summaries = derive(
        STAFF,
        [clock_in(local_dt(2024, 3, 4, 8, 0, 0)), clock_out(local_dt(2024, 3, 4, 16, 30, 15))],
    )

    assert len(summaries) == 1
    summary = summaries[0]
    assert summary.date == date(2024, 3, 4)
    assert summary.progress == WorkProgress.completed
    assert summary.punctuality == Punctuality.late
    assert summary.duration.render() == "8 hours 30 minutes 15 seconds"
    assert summary.clock_in.tzinfo is not None
    assert summary.clock_in.hour == 8


def test_clock_in_only_is_in_progress():
    summaries = derive(STAFF, [clock_in(local_dt(2024, 3, 4, 6, 45))])

    assert summaries[0].progress == WorkProgress.in_progress
    assert summaries[0].punctuality == Punctuality.early_arrival
    assert summaries[0].duration is None
    assert summaries[0].clock_out is None


def test_clock_out_only_is_incomplete():
    summaries = derive(STAFF, [clock_out(local_dt(2024, 3, 4, 16, 0))])

    assert summaries[0].progress == WorkProgress.incomplete
    assert summaries[0].punctuality == Punctuality.none
    assert summaries[0].duration is None


def test_no_events_no_summaries():
    assert derive(STAFF, []) == []


# ═════════════════════════════════════════════════════════════════════
# 3. GROUPING & ORDER
# ═════════════════════════════════════════════════════════════════════


def test_result_independent_of_input_order():
    events = [
        clock_in(local_dt(2024, 3, 4, 7, 0)),
        clock_out(local_dt(2024, 3, 4, 15, 0)),
        clock_in(local_dt(2024, 3, 5, 7, 30)),
        clock_out(local_dt(2024, 3, 5, 16, 0)),
        clock_in(local_dt(2024, 3, 6, 6, 50)),
    ]
    expected = derive(STAFF, events)

    for permutation in itertools.permutations(events):
        assert derive(STAFF, permutation) == expected

    assert [s.date for s in expected] == [date(2024, 3, 4), date(2024, 3, 5), date(2024, 3, 6)]


def test_days_follow_local_midnight():
    """23:30 UTC on the 3rd is 06:30 on the 4th in Jakarta."""
    events = [
        clock_in(datetime(2024, 3, 3, 23, 30, tzinfo=timezone.utc)),
        clock_out(datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)),
    ]

    summaries = derive(STAFF, events)

    assert len(summaries) == 1
    assert summaries[0].date == date(2024, 3, 4)
    assert summaries[0].punctuality == Punctuality.early_arrival
    assert summaries[0].duration.render() == "9 hours 30 minutes 0 seconds"


def test_naive_timestamps_read_as_utc():
    summaries = derive(STAFF, [clock_in(datetime(2024, 3, 4, 0, 0))])

    assert summaries[0].clock_in == local_dt(2024, 3, 4, 7, 0)
    assert summaries[0].punctuality == Punctuality.on_time


def test_derive_all_groups_by_staff():
    other = uuid.UUID("00000000-0000-0000-0000-000000000002")
    events = [
        clock_in(local_dt(2024, 3, 4, 7, 0), other),
        clock_in(local_dt(2024, 3, 4, 8, 0)),
        clock_out(local_dt(2024, 3, 4, 12, 0)),
    ]

    summaries = derive_all(events)

    assert [(s.staff_id, s.progress) for s in summaries] == [
        (STAFF, WorkProgress.completed),
        (other, WorkProgress.in_progress),
    ]
