"""Session ledger — the per-staff, per-day clock-in / clock-out state machine.

    NoSession --clock-in--> ClockedIn --clock-out--> Completed

The state is never cached: every write re-derives it from the events stored
for that staff member and day, then inserts under the
``uq_session_event_staff_day_kind`` constraint so two concurrent requests
cannot both pass validation and both write.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Iterable, Optional, Sequence, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.common.constants import (
    SequenceReason,
    SessionEventKind,
    SessionState,
)
from attendance_ledger.common.exceptions import SequenceViolation, storage_errors
from attendance_ledger.common.timeutils import as_utc, local_day, local_today, utc_now
from attendance_ledger.sessions.models import SessionEvent
from attendance_ledger.staff.service import StaffService

logger = logging.getLogger(__name__)

# (current state, incoming kind) → next state, or the reason it is illegal
_TRANSITIONS: dict[tuple[SessionState, SessionEventKind], Union[SessionState, SequenceReason]] = {
    (SessionState.no_session, SessionEventKind.clock_in): SessionState.clocked_in,
    (SessionState.no_session, SessionEventKind.clock_out): SequenceReason.not_yet_in,
    (SessionState.clocked_in, SessionEventKind.clock_in): SequenceReason.already_in,
    (SessionState.clocked_in, SessionEventKind.clock_out): SessionState.completed,
    (SessionState.completed, SessionEventKind.clock_in): SequenceReason.already_out,
    (SessionState.completed, SessionEventKind.clock_out): SequenceReason.already_out,
}


def derive_state(kinds: Iterable[SessionEventKind]) -> SessionState:
    """State of a day given the kinds of its stored events."""
    seen = set(kinds)
    if SessionEventKind.clock_out in seen:
        return SessionState.completed
    if SessionEventKind.clock_in in seen:
        return SessionState.clocked_in
    return SessionState.no_session


def next_state(state: SessionState, kind: SessionEventKind) -> SessionState:
    """Apply *kind* to *state*; raises SequenceViolation when illegal."""
    outcome = _TRANSITIONS[(state, kind)]
    if isinstance(outcome, SequenceReason):
        raise SequenceViolation(outcome)
    return outcome


class SessionLedger:
    """Async write/read operations over session events."""

    @staticmethod
    async def _kinds_for_day(
        db: AsyncSession,
        staff_id: uuid.UUID,
        day: date,
    ) -> list[SessionEventKind]:
        result = await db.execute(
            select(SessionEvent.kind).where(
                SessionEvent.staff_id == staff_id,
                SessionEvent.day == day,
            )
        )
        return list(result.scalars().all())

    @staticmethod
    async def _clock_in_at(
        db: AsyncSession,
        staff_id: uuid.UUID,
        day: date,
    ) -> Optional[datetime]:
        result = await db.execute(
            select(SessionEvent.timestamp).where(
                SessionEvent.staff_id == staff_id,
                SessionEvent.day == day,
                SessionEvent.kind == SessionEventKind.clock_in,
            )
        )
        return result.scalars().first()

    # ── Record ──────────────────────────────────────────────────────

    @staticmethod
    async def record_event(
        db: AsyncSession,
        staff_id: uuid.UUID,
        kind: SessionEventKind,
        timestamp: Optional[datetime] = None,
    ) -> SessionEvent:
        """Validate *kind* against the day's state and store the event."""

        await StaffService.get_staff(db, staff_id)

        instant = as_utc(timestamp) if timestamp is not None else utc_now()
        day = local_day(instant)

        with storage_errors("session.record_event"):
            state = derive_state(await SessionLedger._kinds_for_day(db, staff_id, day))
            try:
                next_state(state, kind)
                if kind == SessionEventKind.clock_out:
                    clock_in_at = await SessionLedger._clock_in_at(db, staff_id, day)
                    # A clock-out earlier than the clock-in has no session to close
                    if clock_in_at is not None and instant < as_utc(clock_in_at):
                        raise SequenceViolation(SequenceReason.not_yet_in)
            except SequenceViolation as exc:
                logger.info(
                    "Session event rejected: staff=%s day=%s kind=%s reason=%s",
                    staff_id,
                    day,
                    kind.value,
                    exc.reason,
                )
                raise

            event = SessionEvent(staff_id=staff_id, kind=kind, timestamp=instant, day=day)
            db.add(event)
            try:
                await db.flush()
            except IntegrityError:
                await db.rollback()
                # A concurrent request stored the same kind first; report
                # against the state it left behind, or by kind when that
                # state is not yet visible.
                state = derive_state(await SessionLedger._kinds_for_day(db, staff_id, day))
                outcome = _TRANSITIONS[(state, kind)]
                if not isinstance(outcome, SequenceReason):
                    outcome = (
                        SequenceReason.already_in
                        if kind == SessionEventKind.clock_in
                        else SequenceReason.already_out
                    )
                logger.info(
                    "Concurrent session event lost the race: staff=%s day=%s kind=%s",
                    staff_id,
                    day,
                    kind.value,
                )
                raise SequenceViolation(outcome) from None

        logger.info(
            "Session event recorded: staff=%s day=%s kind=%s",
            staff_id,
            day,
            kind.value,
        )
        return event

    # ── Read ────────────────────────────────────────────────────────

    @staticmethod
    async def current_state(
        db: AsyncSession,
        staff_id: uuid.UUID,
        day: Optional[date] = None,
    ) -> SessionState:
        await StaffService.get_staff(db, staff_id)
        with storage_errors("session.current_state"):
            kinds = await SessionLedger._kinds_for_day(db, staff_id, day or local_today())
        return derive_state(kinds)

    @staticmethod
    async def list_for_staff(
        db: AsyncSession,
        staff_id: uuid.UUID,
    ) -> Sequence[SessionEvent]:
        """Every session event of the staff member, unordered."""

        await StaffService.get_staff(db, staff_id)
        with storage_errors("session.list_for_staff"):
            result = await db.execute(
                select(SessionEvent).where(SessionEvent.staff_id == staff_id)
            )
        return result.scalars().all()

    @staticmethod
    async def list_in_range(
        db: AsyncSession,
        *,
        staff_id: Optional[uuid.UUID] = None,
        from_day: Optional[date] = None,
        to_day: Optional[date] = None,
    ) -> Sequence[SessionEvent]:
        """Events whose local day falls in ``[from_day, to_day]``."""

        query = select(SessionEvent)
        if staff_id is not None:
            query = query.where(SessionEvent.staff_id == staff_id)
        if from_day is not None:
            query = query.where(SessionEvent.day >= from_day)
        if to_day is not None:
            query = query.where(SessionEvent.day <= to_day)

        with storage_errors("session.list_in_range"):
            result = await db.execute(query)
        return result.scalars().all()
