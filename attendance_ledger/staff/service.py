"""Staff roster access — list, lookup and create."""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.common.exceptions import (
    NotFoundException,
    ValidationException,
    storage_errors,
)
from attendance_ledger.staff.models import Staff

logger = logging.getLogger(__name__)


class StaffService:
    """Async read/create operations over the staff roster."""

    @staticmethod
    async def list_staff(
        db: AsyncSession,
        *,
        staff_id: Optional[uuid.UUID] = None,
    ) -> Sequence[Staff]:
        """All staff ordered by name, or only *staff_id* when given."""

        query = select(Staff).order_by(Staff.name, Staff.id)
        if staff_id is not None:
            query = query.where(Staff.id == staff_id)
        with storage_errors("list_staff"):
            result = await db.execute(query)
        return result.scalars().all()

    @staticmethod
    async def get_staff(db: AsyncSession, staff_id: uuid.UUID) -> Staff:
        """Return the staff member or raise NotFoundException."""

        with storage_errors("get_staff"):
            staff = await db.get(Staff, staff_id)
        if staff is None:
            raise NotFoundException("Staff", staff_id)
        return staff

    @staticmethod
    async def create_staff(db: AsyncSession, name: str) -> Staff:
        name = name.strip()
        if not name:
            raise ValidationException({"name": ["Name must not be blank."]})

        staff = Staff(name=name)
        with storage_errors("create_staff"):
            db.add(staff)
            await db.flush()
        logger.info("Added staff %s (%s)", staff.id, staff.name)
        return staff
