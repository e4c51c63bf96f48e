"""Sessions router — clock in / clock out and per-staff event listing."""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.common.rate_limit import limiter, write_limit
from attendance_ledger.common.timeutils import local_today
from attendance_ledger.database import get_db
from attendance_ledger.geofence.service import (
    GeofenceValidator,
    ReportedLocationProvider,
    get_geofence_validator,
    require_location,
    session_requires_location,
)
from attendance_ledger.sessions.schemas import (
    SessionEventCreate,
    SessionEventResponse,
    SessionStateResponse,
)
from attendance_ledger.sessions.service import SessionLedger

router = APIRouter(prefix="", tags=["sessions"])


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=SessionEventResponse, status_code=201)
@limiter.limit(write_limit)
async def record_session_event(
    request: Request,
    body: SessionEventCreate,
    validator: GeofenceValidator = Depends(get_geofence_validator),
    db: AsyncSession = Depends(get_db),
):
    """Clock in or clock out for today."""
    if session_requires_location():
        await require_location(ReportedLocationProvider(body.location), validator)

    return await SessionLedger.record_event(db, body.staff_id, body.kind)


# ── GET /{staff_id} ─────────────────────────────────────────────────

@router.get("/{staff_id}", response_model=list[SessionEventResponse])
async def list_session_events(
    staff_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """All clock events of a staff member, oldest first."""
    events = await SessionLedger.list_for_staff(db, staff_id)
    return sorted(events, key=lambda e: (e.day, e.timestamp))


# ── GET /{staff_id}/state ───────────────────────────────────────────

@router.get("/{staff_id}/state", response_model=SessionStateResponse)
async def session_state(
    staff_id: uuid.UUID,
    day: Optional[date] = Query(None, description="Local calendar day; defaults to today"),
    db: AsyncSession = Depends(get_db),
):
    """Where the staff member stands in the day's clock sequence."""
    target = day or local_today()
    state = await SessionLedger.current_state(db, staff_id, target)
    return SessionStateResponse(staff_id=staff_id, day=target, state=state)
