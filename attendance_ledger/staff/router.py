"""Staff router — roster listing and lookup."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.database import get_db
from attendance_ledger.staff.schemas import StaffCreate, StaffResponse
from attendance_ledger.staff.service import StaffService

router = APIRouter(prefix="", tags=["staff"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=list[StaffResponse])
async def list_staff(db: AsyncSession = Depends(get_db)):
    """List every staff member on the roster."""
    return await StaffService.list_staff(db)


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=StaffResponse, status_code=201)
async def create_staff(body: StaffCreate, db: AsyncSession = Depends(get_db)):
    """Add a staff member to the roster."""
    return await StaffService.create_staff(db, body.name)


# ── GET /{staff_id} ─────────────────────────────────────────────────

@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff(staff_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await StaffService.get_staff(db, staff_id)
