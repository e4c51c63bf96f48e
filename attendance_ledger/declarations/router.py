"""Declarations router — submit today's status and list declarations.

A ``Present`` declaration must carry coordinates inside the office geofence;
the check runs before the ledger is touched.
"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.common.rate_limit import limiter, write_limit
from attendance_ledger.database import get_db
from attendance_ledger.declarations.schemas import DeclarationCreate, DeclarationResponse
from attendance_ledger.declarations.service import DeclarationLedger
from attendance_ledger.geofence.service import (
    GeofenceValidator,
    ReportedLocationProvider,
    declaration_requires_location,
    get_geofence_validator,
    require_location,
)

router = APIRouter(prefix="", tags=["declarations"])


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=DeclarationResponse, status_code=201)
@limiter.limit(write_limit)
async def submit_declaration(
    request: Request,
    body: DeclarationCreate,
    validator: GeofenceValidator = Depends(get_geofence_validator),
    db: AsyncSession = Depends(get_db),
):
    """Declare Present / Sick / Leave for a day (once per staff per day)."""
    if declaration_requires_location(body.status):
        await require_location(ReportedLocationProvider(body.location), validator)

    return await DeclarationLedger.submit(
        db,
        body.staff_id,
        body.status,
        day=body.date,
        time_of_day=body.time_of_day,
    )


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=list[DeclarationResponse])
async def list_declarations(
    staff_id: Optional[uuid.UUID] = Query(None),
    from_date: Optional[date] = Query(None, description="Start date (inclusive)"),
    to_date: Optional[date] = Query(None, description="End date (inclusive)"),
    db: AsyncSession = Depends(get_db),
):
    """List declarations, newest day first."""
    declarations = await DeclarationLedger.query(
        db, staff_id=staff_id, from_date=from_date, to_date=to_date,
    )
    return sorted(declarations, key=lambda d: (d.date, str(d.staff_id)), reverse=True)
