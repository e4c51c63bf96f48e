"""Declaration ledger — one Present/Sick/Leave declaration per staff per day.

The existence check and the insert form one atomic step: a fast-path lookup
rejects the common duplicate, and the ``uq_declaration_staff_date``
constraint rejects a concurrent writer that slipped past the lookup.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.common.constants import DeclarationStatus
from attendance_ledger.common.exceptions import (
    DuplicateSubmission,
    ValidationException,
    storage_errors,
)
from attendance_ledger.common.timeutils import to_local, utc_now
from attendance_ledger.declarations.models import Declaration
from attendance_ledger.staff.service import StaffService

logger = logging.getLogger(__name__)


class DeclarationLedger:
    """Async write/read operations over declarations."""

    @staticmethod
    async def _find_existing(
        db: AsyncSession,
        staff_id: uuid.UUID,
        day: date,
    ) -> Optional[Declaration]:
        result = await db.execute(
            select(Declaration).where(
                Declaration.staff_id == staff_id,
                Declaration.date == day,
            )
        )
        return result.scalars().first()

    # ── Submit ──────────────────────────────────────────────────────

    @staticmethod
    async def submit(
        db: AsyncSession,
        staff_id: uuid.UUID,
        status: DeclarationStatus,
        day: Optional[date] = None,
        time_of_day: Optional[time] = None,
    ) -> Declaration:
        """Record a declaration; raises DuplicateSubmission if one exists for the day."""

        await StaffService.get_staff(db, staff_id)

        if day is None or time_of_day is None:
            now = to_local(utc_now())
            day = day or now.date()
            time_of_day = time_of_day or now.time().replace(microsecond=0)

        with storage_errors("declaration.submit"):
            if await DeclarationLedger._find_existing(db, staff_id, day) is not None:
                logger.info("Duplicate declaration rejected: staff=%s date=%s", staff_id, day)
                raise DuplicateSubmission(staff_id, day)

            declaration = Declaration(
                staff_id=staff_id,
                status=status,
                date=day,
                time_of_day=time_of_day,
            )
            db.add(declaration)
            try:
                await db.flush()
            except IntegrityError:
                await db.rollback()
                # Only the (staff_id, date) row of a concurrent writer is a duplicate
                if await DeclarationLedger._find_existing(db, staff_id, day) is None:
                    raise
                logger.info(
                    "Concurrent declaration lost the race: staff=%s date=%s",
                    staff_id,
                    day,
                )
                raise DuplicateSubmission(staff_id, day) from None

        logger.info(
            "Declaration recorded: staff=%s date=%s status=%s",
            staff_id,
            day,
            status.value,
        )
        return declaration

    # ── Query ───────────────────────────────────────────────────────

    @staticmethod
    async def query(
        db: AsyncSession,
        *,
        staff_id: Optional[uuid.UUID] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[Declaration]:
        """Declarations matching the filter (inclusive dates). Order unspecified."""

        if from_date and to_date and from_date > to_date:
            raise ValidationException(
                {"date_range": ["from_date must be before or equal to to_date."]}
            )

        query = select(Declaration)
        if staff_id is not None:
            query = query.where(Declaration.staff_id == staff_id)
        if from_date is not None:
            query = query.where(Declaration.date >= from_date)
        if to_date is not None:
            query = query.where(Declaration.date <= to_date)

        with storage_errors("declaration.query"):
            result = await db.execute(query)
        return result.scalars().all()
