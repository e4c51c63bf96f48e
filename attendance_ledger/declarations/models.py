"""Declaration ORM model — one self-reported status per staff member per day."""

from __future__ import annotations

import datetime as dt
import uuid
from datetime import datetime, time, timezone

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from attendance_ledger.common.constants import DeclarationStatus
from attendance_ledger.database import Base


class Declaration(Base):
    __tablename__ = "declarations"
    __table_args__ = (
        sa.UniqueConstraint("staff_id", "date", name="uq_declaration_staff_date"),
        sa.Index("ix_declarations_date", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    staff_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("staff.id"), nullable=False
    )
    status: Mapped[DeclarationStatus] = mapped_column(
        sa.Enum(
            DeclarationStatus,
            name="declaration_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(sa.Date, nullable=False)
    time_of_day: Mapped[time] = mapped_column(sa.Time, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<Declaration {self.staff_id} {self.date} {self.status}>"
